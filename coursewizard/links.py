"""
Calendar service deep links (Google Calendar, Outlook, Teams).

One URL per lesson. Times are written as local wall-clock times; Teams
links are only produced for online lessons.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List
from urllib.parse import quote

from coursewizard.export_ics import lesson_description, lesson_place
from coursewizard.model import CourseData, Lesson, Location


GOOGLE_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_URL = "https://outlook.live.com/calendar/0/deeplink/compose"
TEAMS_URL = "https://teams.microsoft.com/l/meeting/new"


def _lesson_datetime(lesson: Lesson, hhmm: str) -> datetime:
    return datetime.strptime(f"{lesson.date} {hhmm}", "%d/%m/%Y %H:%M")


def _title(course: CourseData, lesson: Lesson) -> str:
    return quote(f"{course.course_name} - {lesson.subject}", safe="")


def google_calendar_url(course: CourseData, lesson: Lesson, index: int) -> str:
    start = _lesson_datetime(lesson, lesson.start_time).strftime("%Y%m%dT%H%M%S")
    end = _lesson_datetime(lesson, lesson.end_time).strftime("%Y%m%dT%H%M%S")
    details = quote(lesson_description(course, lesson, index), safe="")
    location = quote(lesson_place(course, lesson), safe="")
    return (
        f"{GOOGLE_URL}?action=TEMPLATE&text={_title(course, lesson)}"
        f"&dates={start}/{end}&details={details}&location={location}"
    )


def outlook_calendar_url(course: CourseData, lesson: Lesson, index: int) -> str:
    start = quote(_lesson_datetime(lesson, lesson.start_time).isoformat(), safe="")
    end = quote(_lesson_datetime(lesson, lesson.end_time).isoformat(), safe="")
    body = quote(lesson_description(course, lesson, index), safe="")
    location = quote(lesson_place(course, lesson), safe="")
    return (
        f"{OUTLOOK_URL}?subject={_title(course, lesson)}"
        f"&startdt={start}&enddt={end}&body={body}&location={location}"
    )


def teams_meeting_url(course: CourseData, lesson: Lesson, index: int) -> str:
    start = quote(f"{lesson.date} {lesson.start_time}", safe="")
    end = quote(f"{lesson.date} {lesson.end_time}", safe="")
    return f"{TEAMS_URL}?subject={_title(course, lesson)}&startTime={start}&endTime={end}"


SERVICES: Dict[str, Callable[[CourseData, Lesson, int], str]] = {
    "google": google_calendar_url,
    "outlook": outlook_calendar_url,
    "teams": teams_meeting_url,
}


def calendar_links(course: CourseData, service: str) -> List[str]:
    """
    Return one link per lesson for `service` ("google", "outlook" or "teams").
    Raises ValueError for an unknown service.
    """
    try:
        build = SERVICES[service]
    except KeyError:
        raise ValueError(f"Unknown calendar service: {service!r}") from None

    links: List[str] = []
    for index, lesson in enumerate(course.parsed_calendar.lessons):
        if service == "teams" and lesson.location is not Location.ONLINE:
            continue
        links.append(build(course, lesson, index))
    return links
