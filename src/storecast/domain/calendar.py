"""Day-level classification for the broadcast calendar."""

from __future__ import annotations

import calendar
from datetime import date, datetime
from enum import Enum
from typing import Iterable


class DayClassification(str, Enum):
    """Calendar marker for a single date."""

    BROADCAST = "broadcast"
    SCHEDULED = "scheduled"
    PLAIN = "plain"


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day component of ``value``."""

    if isinstance(value, datetime):
        return value.date()
    return value


def _contains_day(day: date, candidates: Iterable[date | datetime]) -> bool:
    return any(as_date(candidate) == day for candidate in candidates)


def classify(
    day: date | datetime,
    broadcast_dates: Iterable[date | datetime],
    scheduled_dates: Iterable[date | datetime],
) -> DayClassification:
    """Tag ``day``; an aired broadcast outranks a pending schedule."""

    target = as_date(day)
    if _contains_day(target, broadcast_dates):
        return DayClassification.BROADCAST
    if _contains_day(target, scheduled_dates):
        return DayClassification.SCHEDULED
    return DayClassification.PLAIN


def month_grid(anchor: date | datetime) -> list[date]:
    """Every date of the month containing ``anchor``, ascending."""

    target = as_date(anchor)
    _, days_in_month = calendar.monthrange(target.year, target.month)
    return [date(target.year, target.month, day) for day in range(1, days_in_month + 1)]


def leading_blank_days(grid: list[date]) -> int:
    """Sunday-first column of the first grid date (0 = Sunday)."""

    if not grid:
        return 0
    return (grid[0].weekday() + 1) % 7


def _shift_month(anchor: date, months: int) -> date:
    month_index = anchor.year * 12 + (anchor.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    _, days_in_month = calendar.monthrange(year, month)
    return date(year, month, min(anchor.day, days_in_month))


def previous_month(anchor: date | datetime) -> date:
    return _shift_month(as_date(anchor), -1)


def next_month(anchor: date | datetime) -> date:
    return _shift_month(as_date(anchor), 1)
