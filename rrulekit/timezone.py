"""Timestamp normalization helpers for comparing rule bounds and event times."""

from datetime import date, datetime, time, timezone
from typing import Union

UTC = timezone.utc


def ensure_utc_aware(value: Union[datetime, date]) -> datetime:
    """Normalize a date or datetime to a timezone-aware UTC datetime.

    Naive datetimes are assumed to be UTC, aware ones are converted, and plain
    dates map to midnight UTC of that day.

    Args:
        value: Date or datetime to normalize

    Returns:
        Timezone-aware UTC datetime

    Raises:
        TypeError: If value is not a date or datetime
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    raise TypeError(f"Expected date or datetime object, got {type(value)}")


def inclusive_upper_bound(value: Union[datetime, date]) -> datetime:
    """Normalize an inclusive bound; a plain date covers the whole day."""
    if isinstance(value, datetime):
        return ensure_utc_aware(value)
    return datetime.combine(value, time.max, tzinfo=UTC)
