"""Frequency rules deciding when a content group is injected into the broadcast."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

FREQUENCY_MINUTES_MIN = 5
FREQUENCY_MINUTES_MAX = 120
FREQUENCY_MINUTES_FALLBACK = 30

MAX_PLAYS_MIN = 1
MAX_PLAYS_MAX = 50
MAX_PLAYS_FALLBACK = 10

MINUTES_PER_DAY = 24 * 60

# Longer digit runs are far past every bound and parse as +/-10**9.
_MAX_PARSED_DIGITS = 9

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TIME_OF_DAY = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def parse_leading_int(raw_input: object) -> int | None:
    """Parse the leading integer of ``raw_input`` the way form inputs are read.

    ``"12"``, ``" 12 "`` and ``"12abc"`` all yield 12; an empty or
    non-numeric string yields ``None``.
    """

    if isinstance(raw_input, bool):
        return None
    if isinstance(raw_input, int):
        return raw_input
    if isinstance(raw_input, float):
        if not math.isfinite(raw_input):
            return None
        return int(raw_input)
    match = _LEADING_INT.match(str(raw_input or ""))
    if match is None:
        return None
    token = match.group(1)
    sign = -1 if token.startswith("-") else 1
    digits = token.lstrip("+-").lstrip("0") or "0"
    if len(digits) > _MAX_PARSED_DIGITS:
        return sign * 10**_MAX_PARSED_DIGITS
    return sign * int(digits)


def coerce_frequency_minutes(raw_input: object) -> int:
    parsed = parse_leading_int(raw_input)
    if parsed is None or parsed <= 0:
        return FREQUENCY_MINUTES_FALLBACK
    return _clamp(parsed, FREQUENCY_MINUTES_MIN, FREQUENCY_MINUTES_MAX)


def coerce_max_plays(raw_input: object) -> int:
    parsed = parse_leading_int(raw_input)
    if parsed is None or parsed <= 0:
        return MAX_PLAYS_FALLBACK
    return _clamp(parsed, MAX_PLAYS_MIN, MAX_PLAYS_MAX)


def parse_time_of_day(value: str) -> int | None:
    """Return minutes since midnight for an ``HH:MM`` string, or ``None``."""

    match = _TIME_OF_DAY.match(value or "")
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


@dataclass(frozen=True, slots=True)
class FrequencyRule:
    """Scheduling configuration for one content group."""

    enabled: bool = False
    frequency_minutes: int = 60
    max_plays: int = 10
    start_time: str = "08:00"
    end_time: str = "20:00"

    def __post_init__(self) -> None:
        object.__setattr__(self, "frequency_minutes", coerce_frequency_minutes(self.frequency_minutes))
        object.__setattr__(self, "max_plays", coerce_max_plays(self.max_plays))

    def window_minutes(self) -> int:
        """Length of one occurrence of the active window, in minutes."""

        start = parse_time_of_day(self.start_time)
        end = parse_time_of_day(self.end_time)
        if start is None or end is None:
            return 0
        return (end - start) % MINUTES_PER_DAY


def set_enabled(rule: FrequencyRule, enabled: bool) -> FrequencyRule:
    return replace(rule, enabled=bool(enabled))


def set_frequency(rule: FrequencyRule, raw_input: str) -> FrequencyRule:
    return replace(rule, frequency_minutes=coerce_frequency_minutes(raw_input))


def set_max_plays(rule: FrequencyRule, raw_input: str) -> FrequencyRule:
    return replace(rule, max_plays=coerce_max_plays(raw_input))


def set_start_time(rule: FrequencyRule, value: str) -> FrequencyRule:
    return replace(rule, start_time=value)


def set_end_time(rule: FrequencyRule, value: str) -> FrequencyRule:
    return replace(rule, end_time=value)


def in_active_window(rule: FrequencyRule, moment: datetime) -> bool:
    """Check ``moment`` against the rule's ``[start, end)`` time-of-day window.

    A start later than the end wraps midnight. Equal or unparseable bounds
    describe an empty window.
    """

    start = parse_time_of_day(rule.start_time)
    end = parse_time_of_day(rule.end_time)
    if start is None or end is None or start == end:
        return False

    minute_of_day = moment.hour * 60 + moment.minute
    if start < end:
        return start <= minute_of_day < end
    return minute_of_day >= start or minute_of_day < end


def is_due(
    rule: FrequencyRule,
    now: datetime,
    last_fired_at: datetime | None,
    plays_so_far_today: int,
) -> bool:
    """Decide whether the group governed by ``rule`` should be inserted at ``now``."""

    if not rule.enabled:
        return False
    if not in_active_window(rule, now):
        return False
    if plays_so_far_today >= rule.max_plays:
        return False
    if last_fired_at is None:
        return True
    return now - last_fired_at >= timedelta(minutes=rule.frequency_minutes)


def plan_insertions(rule: FrequencyRule, day: datetime | None = None) -> list[str]:
    """Replay :func:`is_due` minute by minute over one window occurrence.

    Returns the ``HH:MM`` slots at which the group fires, starting at the
    window start on ``day`` (a fixed reference date when omitted, since only
    the time of day matters).
    """

    start = parse_time_of_day(rule.start_time)
    window = rule.window_minutes()
    if not rule.enabled or start is None or window == 0:
        return []

    base = (day or datetime(2000, 1, 1)).replace(hour=0, minute=0, second=0, microsecond=0)
    cursor = base + timedelta(minutes=start)
    last_fired_at: datetime | None = None
    slots: list[str] = []
    for _ in range(window):
        if is_due(rule, cursor, last_fired_at, len(slots)):
            slots.append(cursor.strftime("%H:%M"))
            last_fired_at = cursor
        cursor += timedelta(minutes=1)
    return slots
