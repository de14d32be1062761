"""Recurrence rule parsing, serialization and occurrence expansion."""

from .exceptions import RRuleError, RRuleParseError, RRuleSerializationError
from .expander import RRuleExpander, advance, expand_between, expand_by_count
from .models import (
    ByRule,
    EventLike,
    Frequency,
    RecurrenceRule,
    RecurringEvent,
    Weekday,
    WeekdayCode,
)
from .parser import parse_rrule, serialize_rrule, tokenize

__all__ = [
    "ByRule",
    "EventLike",
    "Frequency",
    "RRuleError",
    "RRuleExpander",
    "RRuleParseError",
    "RRuleSerializationError",
    "RecurrenceRule",
    "RecurringEvent",
    "Weekday",
    "WeekdayCode",
    "advance",
    "expand_between",
    "expand_by_count",
    "parse_rrule",
    "serialize_rrule",
    "tokenize",
]
