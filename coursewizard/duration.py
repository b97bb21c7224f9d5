"""
Lesson duration arithmetic.

The 13:00-14:00 window never counts as course time. The rules below are
applied in order (first match wins):

1. starts before 13:00 and ends after 14:00  -> subtract 60 minutes
2. starts before 13:00 and ends 13:00..14:00 -> no subtraction
3. starts in [13:00, 14:00)                  -> count from 14:00
4. otherwise                                  -> end - start

The result is in decimal hours and never negative.
"""

from __future__ import annotations

from typing import Any, Optional


LUNCH_START = 13 * 60
LUNCH_END = 14 * 60
LUNCH_MINUTES = LUNCH_END - LUNCH_START


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def lesson_minutes(start: int, end: int) -> int:
    if start < LUNCH_START and end > LUNCH_END:
        minutes = end - start - LUNCH_MINUTES
    elif start < LUNCH_START and LUNCH_START <= end <= LUNCH_END:
        minutes = end - start
    elif LUNCH_START <= start < LUNCH_END:
        minutes = end - LUNCH_END
    else:
        minutes = end - start
    return max(minutes, 0)


def compute_hours(start: str, end: str, location: Optional[Any] = None) -> float:
    """
    Duration of a lesson in decimal hours, lunch break excluded.

    `location` is part of the lesson's identity but does not change the
    arithmetic: office and online lessons follow the same lunch rule.
    """
    return lesson_minutes(time_to_minutes(start), time_to_minutes(end)) / 60
