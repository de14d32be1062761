"""Command-line argument parsing for rrulekit."""

import argparse
from datetime import date, datetime
from typing import Union

from .. import __version__


def parse_timestamp(value: str) -> Union[datetime, date]:
    """Parse an ISO date or date-time argument.

    Args:
        value: ISO 8601 string such as ``2025-06-23`` or ``2025-06-23T08:30:00Z``

    Returns:
        A date for date-only input, otherwise a datetime

    Raises:
        argparse.ArgumentTypeError: If the value is not ISO formatted
    """
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid ISO timestamp: {value!r}") from e


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with ``parse`` and ``expand`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="rrulekit",
        description="Parse, validate and expand iCalendar recurrence rules",
        epilog=(
            "Examples:\n"
            '  rrulekit parse "FREQ=WEEKLY;BYDAY=MO,WE;COUNT=4"\n'
            '  rrulekit expand "FREQ=DAILY" --start 2025-01-01T09:00 --end 2025-01-01T10:00 \\\n'
            "      --window-start 2025-01-05 --window-end 2025-01-08"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a rule and print its canonical form")
    parse_cmd.add_argument("rule", help="RRULE value, e.g. FREQ=DAILY;COUNT=3")
    parse_cmd.add_argument("--json", action="store_true", help="Print the parsed fields as JSON")

    expand_cmd = subparsers.add_parser("expand", help="List occurrences of an event")
    expand_cmd.add_argument("rule", help="RRULE value, e.g. FREQ=DAILY;COUNT=3")
    expand_cmd.add_argument("--start", type=parse_timestamp, required=True, help="Event start")
    expand_cmd.add_argument("--end", type=parse_timestamp, required=True, help="Event end")
    expand_cmd.add_argument("--window-start", type=parse_timestamp, help="Window start (inclusive)")
    expand_cmd.add_argument("--window-end", type=parse_timestamp, help="Window end (inclusive)")

    return parser
