"""Date manipulation utilities"""

import math
from datetime import date, datetime, timezone
from typing import Any, Optional

SECONDS_PER_DAY = 24 * 60 * 60


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Normalize a date, datetime or ISO string to a naive UTC datetime.

    Dates map to midnight. Returns None for anything that cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def days_between(start: Any, end: Any) -> int:
    """Whole days from start to end, floored; 0 when either side is not a valid date"""
    start_dt = to_datetime(start)
    end_dt = to_datetime(end)
    if start_dt is None or end_dt is None:
        return 0

    seconds = (end_dt - start_dt).total_seconds()
    return math.floor(seconds / SECONDS_PER_DAY)


def utc_now() -> datetime:
    """Current wall-clock time as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
