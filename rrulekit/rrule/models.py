"""Data models for recurrence rule processing."""

import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

Timestamp = Union[datetime, date]

_POSITION_RE = re.compile(r"[+-]?\d+")
MAX_WEEKDAY_POSITION = 53


class Frequency(str, Enum):
    """Base repetition unit of a recurrence rule."""

    SECONDLY = "SECONDLY"
    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class WeekdayCode(str, Enum):
    """Two-letter iCalendar day codes."""

    SU = "SU"
    MO = "MO"
    TU = "TU"
    WE = "WE"
    TH = "TH"
    FR = "FR"
    SA = "SA"


class ByRule(str, Enum):
    """BY-filter kinds, in canonical serialization order."""

    BYSECOND = "BYSECOND"
    BYMINUTE = "BYMINUTE"
    BYHOUR = "BYHOUR"
    BYDAY = "BYDAY"
    BYMONTHDAY = "BYMONTHDAY"
    BYYEARDAY = "BYYEARDAY"
    BYWEEKNO = "BYWEEKNO"
    BYMONTH = "BYMONTH"
    BYSETPOS = "BYSETPOS"


def _empty_filters() -> Dict[ByRule, Optional[List[Any]]]:
    return {by_rule: None for by_rule in ByRule}


class Weekday(BaseModel):
    """A BYDAY entry: optional ordinal position plus day code (e.g. ``-1FR``)."""

    day: WeekdayCode = Field(..., description="Two-letter day code")
    position: Optional[int] = Field(default=None, description="Signed ordinal, None when absent")

    model_config = ConfigDict(frozen=True)

    @field_validator("position")
    @classmethod
    def check_position(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and (value == 0 or abs(value) > MAX_WEEKDAY_POSITION):
            raise ValueError(f"Weekday position must be within ±1..{MAX_WEEKDAY_POSITION}")
        return value

    @classmethod
    def from_ical(cls, text: str) -> "Weekday":
        """Build a Weekday from a ``[sign][digits]<DAY>`` token.

        Raises:
            ValueError: If the token is not a valid BYDAY entry
        """
        text = text.strip()
        prefix, code = text[:-2], text[-2:]
        if code not in WeekdayCode.__members__:
            raise ValueError(f"Unknown day code in BYDAY entry: {text!r}")
        if prefix and not _POSITION_RE.fullmatch(prefix):
            raise ValueError(f"Malformed ordinal in BYDAY entry: {text!r}")
        return cls(day=WeekdayCode(code), position=int(prefix) if prefix else None)

    def __str__(self) -> str:
        position = "" if self.position is None else str(self.position)
        return f"{position}{self.day.value}"


class RecurrenceRule(BaseModel):
    """Structured form of one RRULE value.

    Every field is settable so a rule can be assembled programmatically before
    being serialized; assignments are validated.
    """

    frequency: Optional[Frequency] = Field(default=None, description="FREQ, required to serialize")
    until: Optional[Timestamp] = Field(default=None, description="Inclusive upper bound")
    count: Optional[int] = Field(default=None, ge=0, description="Maximum number of occurrences")
    interval: Optional[int] = Field(default=None, ge=1, description="Step multiplier")
    by_filters: Dict[ByRule, Optional[List[Union[Weekday, int]]]] = Field(
        default_factory=_empty_filters, description="BY-rule values keyed by kind"
    )
    week_start: Optional[WeekdayCode] = Field(default=None, description="WKST day code")
    raw_text: Optional[str] = Field(default=None, description="Token as originally parsed")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("by_filters")
    @classmethod
    def normalize_filters(
        cls, value: Dict[ByRule, Optional[List[Union[Weekday, int]]]]
    ) -> Dict[ByRule, Optional[List[Union[Weekday, int]]]]:
        filters = _empty_filters()
        for by_rule, values in value.items():
            if values is not None:
                if by_rule is ByRule.BYDAY:
                    if not all(isinstance(item, Weekday) for item in values):
                        raise ValueError("BYDAY values must be Weekday entries")
                elif not all(isinstance(item, int) for item in values):
                    raise ValueError(f"{by_rule.value} values must be integers")
            filters[by_rule] = values
        return filters

    @field_serializer("by_filters")
    def serialize_filters(self, filters: Dict[ByRule, Optional[List[Any]]]) -> Dict[str, Any]:
        return {
            by_rule.value: None if values is None else [
                str(item) if isinstance(item, Weekday) else item for item in values
            ]
            for by_rule, values in filters.items()
        }

    @property
    def effective_interval(self) -> int:
        """Interval used for stepping, 1 when INTERVAL is absent."""
        return self.interval or 1

    @property
    def effective_week_start(self) -> WeekdayCode:
        """Week start day, MO when WKST is absent."""
        return self.week_start or WeekdayCode.MO

    @property
    def is_bounded(self) -> bool:
        """Check if the rule carries an UNTIL or COUNT bound."""
        return self.until is not None or self.count is not None

    def get_filter(self, by_rule: Union[ByRule, str]) -> Optional[List[Any]]:
        """Get the values of one BY-filter, None when absent."""
        return self.by_filters[ByRule(by_rule)]

    def set_filter(self, by_rule: Union[ByRule, str], values: Optional[List[Any]]) -> None:
        """Replace the values of one BY-filter (validated)."""
        filters = dict(self.by_filters)
        filters[ByRule(by_rule)] = values
        self.by_filters = filters

    @classmethod
    def from_ical(cls, token: str) -> "RecurrenceRule":
        """Parse an RRULE value."""
        from .parser import parse_rrule  # noqa: PLC0415

        return parse_rrule(token)

    def to_ical(self) -> str:
        """Serialize to canonical RRULE text."""
        from .parser import serialize_rrule  # noqa: PLC0415

        return serialize_rrule(self)

    def _semantic_fields(self) -> tuple:
        return (
            self.frequency,
            self.until,
            self.count,
            self.interval,
            self.by_filters,
            self.week_start,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecurrenceRule):
            return NotImplemented
        return self._semantic_fields() == other._semantic_fields()


@runtime_checkable
class EventLike(Protocol):
    """Minimal event interface the occurrence expander relies on."""

    start: Any
    end: Any

    def clone(self) -> "EventLike":
        """Return an independent deep copy."""


class RecurringEvent(BaseModel):
    """Anchor event carrying an optional recurrence rule."""

    uid: str = Field(..., description="Event UID")
    summary: str = Field(default="", description="Event summary/title")
    start: Timestamp = Field(..., description="Event start")
    end: Timestamp = Field(..., description="Event end")
    rrule: Optional[RecurrenceRule] = Field(default=None, description="Recurrence rule")

    model_config = ConfigDict(validate_assignment=True)

    @property
    def duration(self) -> timedelta:
        """Elapsed time between start and end."""
        return self.end - self.start

    @property
    def is_recurring(self) -> bool:
        """Check if the event has a recurrence rule attached."""
        return self.rrule is not None

    def clone(self) -> "RecurringEvent":
        """Return an independent deep copy of this event."""
        return self.model_copy(deep=True)

    def occurrences(self) -> List["RecurringEvent"]:
        """Count-based occurrences of this event's rule."""
        from .expander import expand_by_count  # noqa: PLC0415

        if self.rrule is None:
            return []
        return expand_by_count(self, self.rrule)

    def occurrences_between(
        self, window_start: Timestamp, window_end: Timestamp
    ) -> List["RecurringEvent"]:
        """Occurrences of this event's rule starting within the window."""
        from .expander import expand_between  # noqa: PLC0415

        if self.rrule is None:
            return []
        return expand_between(self, self.rrule, window_start, window_end)
