"""rrulekit - iCalendar RRULE parsing, serialization and occurrence expansion."""

from .rrule import (
    ByRule,
    Frequency,
    RecurrenceRule,
    RecurringEvent,
    RRuleError,
    RRuleExpander,
    RRuleParseError,
    RRuleSerializationError,
    Weekday,
    WeekdayCode,
    expand_between,
    expand_by_count,
    parse_rrule,
    serialize_rrule,
)

__version__ = "1.0.0"

__all__ = [
    "ByRule",
    "Frequency",
    "RRuleError",
    "RRuleExpander",
    "RRuleParseError",
    "RRuleSerializationError",
    "RecurrenceRule",
    "RecurringEvent",
    "Weekday",
    "WeekdayCode",
    "__version__",
    "expand_between",
    "expand_by_count",
    "parse_rrule",
    "serialize_rrule",
]
