"""CLI module for rrulekit.

Provides the ``parse`` and ``expand`` commands on top of the rule parser and
occurrence expander.
"""

import argparse
import json
import logging
from typing import Optional, Sequence

from ..config.settings import get_settings
from ..rrule import RecurringEvent, RRuleError, expand_between, expand_by_count, parse_rrule
from ..utils.logging import configure_logging
from .parser import create_parser, parse_timestamp

logger = logging.getLogger(__name__)


def run_parse(args: argparse.Namespace) -> int:
    """Print the canonical serialization (or JSON fields) of a rule."""
    rule = parse_rrule(args.rule)
    if args.json:
        print(json.dumps(rule.model_dump(mode="json"), indent=2))
    else:
        print(rule.to_ical())
    return 0


def run_expand(args: argparse.Namespace) -> int:
    """Print one ``start -> end`` line per occurrence."""
    rule = parse_rrule(args.rule)
    event = RecurringEvent(uid="cli-event", start=args.start, end=args.end, rrule=rule)

    if (args.window_start is None) != (args.window_end is None):
        print("Error: --window-start and --window-end must be given together")
        return 1

    if args.window_start is not None:
        occurrences = expand_between(event, rule, args.window_start, args.window_end)
    else:
        occurrences = expand_by_count(event, rule)

    for occurrence in occurrences:
        print(f"{occurrence.start.isoformat()} -> {occurrence.end.isoformat()}")
    logger.debug("Printed %d occurrences", len(occurrences))
    return 0


def main_entry(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with argument parsing.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(debug_mode=args.debug, level=get_settings().log_level)

    try:
        if args.command == "parse":
            return run_parse(args)
        return run_expand(args)
    except RRuleError as e:
        print(f"Error: {e.message}")
        return 1


__all__ = ["create_parser", "main_entry", "parse_timestamp", "run_expand", "run_parse"]
