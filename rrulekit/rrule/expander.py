"""Occurrence expansion for parsed recurrence rules."""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, TypeVar

from dateutil.relativedelta import relativedelta

from ..config.settings import DEFAULT_FALLBACK_HORIZON_SECONDS, get_settings
from ..timezone import ensure_utc_aware, inclusive_upper_bound
from .exceptions import RRuleError
from .models import EventLike, Frequency, RecurrenceRule, Timestamp

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT", bound=EventLike)

_STEP_DELTAS: Dict[Frequency, Callable[[int], relativedelta]] = {
    Frequency.SECONDLY: lambda n: relativedelta(seconds=n),
    Frequency.MINUTELY: lambda n: relativedelta(minutes=n),
    Frequency.HOURLY: lambda n: relativedelta(hours=n),
    Frequency.DAILY: lambda n: relativedelta(days=n),
    Frequency.WEEKLY: lambda n: relativedelta(weeks=n),
    # relativedelta carries the year and clamps the day to the target month's length
    Frequency.MONTHLY: lambda n: relativedelta(months=n),
    Frequency.YEARLY: lambda n: relativedelta(years=n),
}

_FIXED_STEP_SECONDS = {
    Frequency.SECONDLY: 1,
    Frequency.MINUTELY: 60,
    Frequency.HOURLY: 3600,
    Frequency.DAILY: 86400,
    Frequency.WEEKLY: 7 * 86400,
}

_CALENDAR_STEP_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.YEARLY: 12,
}


class RRuleExpander:
    """Expands one recurrence rule into occurrences of an anchor event.

    Occurrences are clones of the anchor with ``start``/``end`` replaced; the
    anchor itself is never modified. BY-filters are not applied: occurrences
    step by frequency and interval only.
    """

    def __init__(self, rule: RecurrenceRule, settings: Optional[Any] = None):
        """Initialize RRuleExpander with a rule and settings.

        Args:
            rule: Parsed or programmatically built recurrence rule
            settings: Settings object, defaults to the global settings
        """
        if settings is None:
            settings = get_settings()
        self.rule = rule
        self.settings = settings
        self.fallback_horizon = timedelta(
            seconds=getattr(settings, "fallback_horizon_seconds", DEFAULT_FALLBACK_HORIZON_SECONDS)
        )
        self.max_occurrences: Optional[int] = getattr(settings, "max_occurrences", None)

    def advance(self, timestamp: Timestamp, times: int = 1) -> Timestamp:
        """Step a timestamp forward by ``times`` frequency units.

        Each unit is ``interval`` times the base frequency. MONTHLY and YEARLY
        steps keep the day and time of day, carrying the year and clamping to
        the last day of shorter months (Jan 31 + 1 month -> Feb 28/29).

        Args:
            timestamp: Date or datetime to step from
            times: Number of steps, must not be negative

        Returns:
            Stepped timestamp of the same kind as the input

        Raises:
            RRuleError: If the rule has no FREQ
        """
        return advance(self.rule, timestamp, times)

    def cutoff(self, anchor: Timestamp) -> Timestamp:
        """Latest instant a windowed expansion may reach for this anchor.

        UNTIL when set, otherwise COUNT steps past the anchor, otherwise the
        configured fallback horizon past the anchor.
        """
        if self.rule.until is not None:
            return self.rule.until
        if self.rule.count is not None:
            return self.advance(anchor, self.rule.count)
        return anchor + self.fallback_horizon

    def expand_by_count(self, event: EventT) -> List[EventT]:
        """Generate exactly COUNT occurrences, one day apart, from the anchor.

        This stride is a day per occurrence regardless of frequency. Returns an
        empty list when the rule has no COUNT.
        """
        if self.rule.count is None:
            logger.warning(
                "Count-based expansion requested for rule without COUNT: %s",
                self.rule.raw_text or self.rule.frequency,
            )
            return []

        occurrences = [
            self._make_occurrence(
                event, event.start + timedelta(days=offset), event.end + timedelta(days=offset)
            )
            for offset in range(self.rule.count)
        ]
        return self._limit(occurrences)

    def expand_between(
        self, event: EventT, window_start: Timestamp, window_end: Timestamp
    ) -> List[EventT]:
        """Generate occurrences whose start lies within ``[window_start, window_end]``.

        Args:
            event: Anchor event providing ``start``, ``end`` and ``clone()``
            window_start: Inclusive window start
            window_end: Inclusive window end (a plain date covers the whole day)

        Returns:
            Occurrences in strictly increasing start order, possibly empty.
            Each keeps the anchor's duration, even when a month-end start is clamped
        """
        anchor_start = event.start
        duration = event.end - event.start
        lower = ensure_utc_aware(window_start)
        upper = min(
            inclusive_upper_bound(window_end),
            inclusive_upper_bound(self.cutoff(anchor_start)),
        )

        logger.debug(
            "RRULE expansion: rule=%s anchor=%s window_start=%s window_end=%s limit=%s",
            self.rule.raw_text or self.rule.frequency,
            anchor_start.isoformat(),
            lower.isoformat(),
            inclusive_upper_bound(window_end).isoformat(),
            upper.isoformat(),
        )

        if upper < lower:
            return []

        occurrences: List[EventT] = []
        index = self._first_candidate_index(anchor_start, lower)
        while self.rule.count is None or index < self.rule.count:
            start = self.advance(anchor_start, index)
            normalized = ensure_utc_aware(start)
            if normalized > upper:
                break
            if normalized >= lower:
                occurrences.append(self._make_occurrence(event, start, start + duration))
                if self.max_occurrences is not None and len(occurrences) >= self.max_occurrences:
                    logger.warning(f"Limiting RRULE expansion to {self.max_occurrences} occurrences")
                    break
            index += 1

        logger.debug("RRULE expansion result: occurrences=%d", len(occurrences))
        return occurrences

    def _first_candidate_index(self, anchor: Timestamp, lower: datetime) -> int:
        """Lower estimate of the first step index that can reach ``lower``.

        Skips whole steps that certainly precede the window; the caller walks
        forward from here. Aware anchors keep a day of slack for UTC offset
        changes.
        """
        anchor_utc = ensure_utc_aware(anchor)
        if lower <= anchor_utc:
            return 0

        frequency = _require_frequency(self.rule)
        interval = self.rule.effective_interval
        if frequency in _FIXED_STEP_SECONDS:
            slack = timedelta(days=1) if _is_aware(anchor) else timedelta(0)
            gap = (lower - anchor_utc - slack).total_seconds()
            return max(0, int(gap // (_FIXED_STEP_SECONDS[frequency] * interval)))

        months = (lower.year - anchor_utc.year) * 12 + (lower.month - anchor_utc.month) - 2
        return max(0, months // (_CALENDAR_STEP_MONTHS[frequency] * interval))

    def _make_occurrence(self, event: EventT, start: Timestamp, end: Timestamp) -> EventT:
        occurrence = event.clone()
        occurrence.start = start
        occurrence.end = end
        return occurrence  # type: ignore[return-value]

    def _limit(self, occurrences: List[EventT]) -> List[EventT]:
        if self.max_occurrences is not None and len(occurrences) > self.max_occurrences:
            logger.warning(f"Limiting RRULE expansion to {self.max_occurrences} occurrences")
            return occurrences[: self.max_occurrences]
        return occurrences


def _is_aware(value: Timestamp) -> bool:
    return isinstance(value, datetime) and value.tzinfo is not None


def _require_frequency(rule: RecurrenceRule) -> Frequency:
    if rule.frequency is None:
        raise RRuleError("Cannot expand a recurrence rule without FREQ", field="FREQ")
    return rule.frequency


def advance(rule: RecurrenceRule, timestamp: Timestamp, times: int = 1) -> Timestamp:
    """Step a timestamp forward by ``times`` units of the rule's frequency.

    Needs no settings; see RRuleExpander.advance for the stepping rules.

    Raises:
        RRuleError: If the rule has no FREQ
    """
    if times < 0:
        raise ValueError(f"Cannot step backwards ({times} steps)")
    step = _STEP_DELTAS[_require_frequency(rule)]
    return timestamp + step(times * rule.effective_interval)


def expand_by_count(
    event: EventT, rule: RecurrenceRule, settings: Optional[Any] = None
) -> List[EventT]:
    """Generate COUNT occurrences of ``event`` (see RRuleExpander.expand_by_count)."""
    return RRuleExpander(rule, settings).expand_by_count(event)


def expand_between(
    event: EventT,
    rule: RecurrenceRule,
    window_start: Timestamp,
    window_end: Timestamp,
    settings: Optional[Any] = None,
) -> List[EventT]:
    """Generate occurrences of ``event`` starting within the window."""
    return RRuleExpander(rule, settings).expand_between(event, window_start, window_end)
