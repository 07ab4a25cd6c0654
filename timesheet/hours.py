from __future__ import annotations
from datetime import date, timedelta

HOURS_PER_WEEKDAY = 7


def weekday_count(start: date, end: date) -> int:
    """Count Monday-Friday dates in the inclusive range; an inverted range is empty."""

    if end < start:
        return 0
    days = (end - start).days + 1
    full_weeks, remainder = divmod(days, 7)
    count = full_weeks * 5
    for offset in range(remainder):
        if (start + timedelta(days=offset)).weekday() < 5:
            count += 1
    return count


def expected_hours(start: date, end: date, hours_per_weekday: int = HOURS_PER_WEEKDAY) -> int:
    return weekday_count(start, end) * hours_per_weekday
