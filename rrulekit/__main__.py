"""Entry point for `python -m rrulekit` command."""

import sys

from rrulekit.cli import main_entry


def main() -> int:
    """Run the command-line interface and return its exit code."""
    return main_entry()


if __name__ == "__main__":
    sys.exit(main())
