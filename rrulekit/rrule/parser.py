"""RRULE value parsing and canonical serialization."""

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from icalendar.prop import vDDDTypes

from .exceptions import RRuleParseError, RRuleSerializationError
from .models import ByRule, Frequency, RecurrenceRule, Timestamp, Weekday, WeekdayCode

logger = logging.getLogger(__name__)

PROPERTY_PREFIX = "RRULE:"

_SIGNED_INT_RE = re.compile(r"[+-]?\d+")
_UNSIGNED_INT_RE = re.compile(r"\d+")


def _parse_frequency(value: str) -> Frequency:
    if value not in Frequency.__members__:
        raise ValueError(f"Unsupported frequency: {value!r}")
    return Frequency(value)


def _parse_until(value: str) -> Timestamp:
    parsed = vDDDTypes.from_ical(value)
    if not isinstance(parsed, date):
        raise ValueError(f"UNTIL must be a date or date-time, got {value!r}")
    return parsed


def _parse_unsigned(value: str) -> int:
    if not _UNSIGNED_INT_RE.fullmatch(value):
        raise ValueError(f"Expected a non-negative integer, got {value!r}")
    return int(value)


def _parse_interval(value: str) -> int:
    interval = _parse_unsigned(value)
    if interval == 0:
        raise ValueError("INTERVAL must be positive")
    return interval


def _parse_int_list(value: str) -> List[int]:
    items = value.split(",")
    for item in items:
        if not _SIGNED_INT_RE.fullmatch(item):
            raise ValueError(f"Expected a signed integer, got {item!r}")
    return [int(item) for item in items]


def _parse_weekday_list(value: str) -> List[Weekday]:
    return [Weekday.from_ical(item) for item in value.split(",")]


def _parse_week_start(value: str) -> WeekdayCode:
    if value not in WeekdayCode.__members__:
        raise ValueError(f"Unknown day code: {value!r}")
    return WeekdayCode(value)


# Known keys and the typed parser for their values. Anything else is ignored.
_FIELD_PARSERS: Dict[str, Callable[[str], Any]] = {
    "FREQ": _parse_frequency,
    "UNTIL": _parse_until,
    "COUNT": _parse_unsigned,
    "INTERVAL": _parse_interval,
    "WKST": _parse_week_start,
    ByRule.BYDAY.value: _parse_weekday_list,
}
for _by_rule in ByRule:
    _FIELD_PARSERS.setdefault(_by_rule.value, _parse_int_list)

_RULE_ATTRIBUTES = {
    "FREQ": "frequency",
    "UNTIL": "until",
    "COUNT": "count",
    "INTERVAL": "interval",
    "WKST": "week_start",
}


def tokenize(token: str) -> Dict[str, str]:
    """Split an RRULE value into its ``KEY=VALUE`` pairs.

    The first occurrence of a repeated key wins. Empty parts (for example a
    trailing ``;``) are skipped.

    Raises:
        RRuleParseError: If a part has no ``=`` separator
    """
    text = token.strip()
    if text.startswith(PROPERTY_PREFIX):
        text = text[len(PROPERTY_PREFIX) :]

    pairs: Dict[str, str] = {}
    for part in text.split(";"):
        if not part:
            continue
        key, separator, value = part.partition("=")
        if not separator:
            raise RRuleParseError(f"Malformed RRULE part {part!r}: expected KEY=VALUE", token=token)
        if key in pairs:
            logger.debug("Ignoring repeated RRULE key %s in %r", key, token)
            continue
        pairs[key] = value
    return pairs


def parse_rrule(token: str) -> RecurrenceRule:
    """Parse an RRULE value into a RecurrenceRule.

    Args:
        token: RRULE value (e.g. "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE")

    Returns:
        Parsed rule with ``raw_text`` set to the token as given

    Raises:
        RRuleParseError: If FREQ is missing or any known field is malformed
    """
    if not token or not token.strip():
        raise RRuleParseError("Empty RRULE value", token=token)

    pairs = tokenize(token)
    if "FREQ" not in pairs:
        logger.debug("RRULE value without FREQ: %r", token)
        raise RRuleParseError("FREQ must be specified for RRULE values", field="FREQ", token=token)

    fields: Dict[str, Any] = {}
    by_filters: Dict[ByRule, Optional[List[Any]]] = {}
    for key, value in pairs.items():
        field_parser = _FIELD_PARSERS.get(key)
        if field_parser is None:
            logger.debug("Ignoring unknown RRULE key %s", key)
            continue
        try:
            parsed = field_parser(value)
        except ValueError as e:
            logger.debug("Invalid RRULE %s value %r: %s", key, value, e)
            raise RRuleParseError(f"Invalid {key} value {value!r}: {e}", field=key, token=token) from e

        if key in _RULE_ATTRIBUTES:
            fields[_RULE_ATTRIBUTES[key]] = parsed
        else:
            by_filters[ByRule(key)] = parsed

    rule = RecurrenceRule(**fields, by_filters=by_filters, raw_text=token)
    logger.debug("Parsed RRULE %r as frequency=%s", token, rule.frequency)
    return rule


def format_timestamp(value: Timestamp) -> str:
    """Format a date or date-time in iCalendar form, aware values as UTC."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        utc_value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return vDDDTypes(utc_value).to_ical().decode("utf-8") + "Z"
    return vDDDTypes(value).to_ical().decode("utf-8")


def serialize_rrule(rule: RecurrenceRule) -> str:
    """Serialize a RecurrenceRule to canonical RRULE text.

    Output order is FREQ, UNTIL, COUNT, INTERVAL, the BY-filters in declaration
    order, then WKST. Absent fields are omitted.

    Raises:
        RRuleSerializationError: If FREQ is unset or both UNTIL and COUNT are set
    """
    if rule.frequency is None:
        raise RRuleSerializationError("FREQ must be specified for RRULE values", field="FREQ")
    if rule.until is not None and rule.count is not None:
        raise RRuleSerializationError(
            "UNTIL and COUNT must not both be specified for RRULE values", field="UNTIL"
        )

    parts = [f"FREQ={rule.frequency.value}"]
    if rule.until is not None:
        parts.append(f"UNTIL={format_timestamp(rule.until)}")
    if rule.count is not None:
        parts.append(f"COUNT={rule.count}")
    if rule.interval is not None:
        parts.append(f"INTERVAL={rule.interval}")

    for by_rule in ByRule:
        values = rule.by_filters.get(by_rule)
        if values:
            parts.append(f"{by_rule.value}={','.join(str(item) for item in values)}")

    if rule.week_start is not None:
        parts.append(f"WKST={rule.week_start.value}")

    return ";".join(parts)
