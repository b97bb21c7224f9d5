"""
Calendar aggregation.

Reduce an ordered list of lessons to a ParsedCalendar: first/last date and
hour totals split by location. Totals are plain sums; rounding is left to
whoever displays them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Sequence

from coursewizard.model import Lesson, Location, ParsedCalendar


def lesson_date(lesson: Lesson) -> date:
    """
    Convert the lesson's DD/MM/YYYY token to a date.
    Raises ValueError for impossible dates like 31/02/2024.
    """
    return datetime.strptime(lesson.date, "%d/%m/%Y").date()


def aggregate(lessons: Sequence[Lesson]) -> ParsedCalendar:
    """
    Build the calendar summary for `lessons`. Empty input gives an empty calendar.
    """
    if not lessons:
        return ParsedCalendar()

    dates: List[date] = []
    for lesson in lessons:
        try:
            dates.append(lesson_date(lesson))
        except ValueError:
            # keep the lesson in the totals, just not in the date range
            continue

    presence = sum(lesson.hours for lesson in lessons if lesson.location is Location.OFFICE)
    online = sum(lesson.hours for lesson in lessons if lesson.location is Location.ONLINE)

    return ParsedCalendar(
        start_date=min(dates) if dates else None,
        end_date=max(dates) if dates else None,
        total_hours=presence + online,
        presence_hours=presence,
        online_hours=online,
        lessons=list(lessons),
    )
