from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or a full ISO-8601 timestamp) into a calendar date.

    Timestamps carrying an offset are converted to local time first, so the
    date is the local calendar day "today" is measured against.
    """
    v = (value or "").strip()
    try:
        if len(v) > 10:
            parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone()
            return parsed.date()
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so callers can pass a fixed clock in tests.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def as_date(value: Union[date, datetime]) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(value: Union[date, datetime]) -> datetime:
    return datetime.combine(as_date(value), time.min)


def end_of_day(value: Union[date, datetime]) -> datetime:
    return datetime.combine(as_date(value), time.max)
