"""
iCalendar (.ics) export.

We convert the course lessons into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from coursewizard.model import CourseData, Lesson, Location


UID_DOMAIN = "coursewizard"


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(date_dd_mm_yyyy: str, time_hh_mm: str) -> str:
    """
    Convert lesson date + time to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.strptime(f"{date_dd_mm_yyyy} {time_hh_mm}", "%d/%m/%Y %H:%M")
    return dt.strftime("%Y%m%dT%H%M00")


def lesson_place(course: CourseData, lesson: Lesson) -> str:
    if lesson.location is Location.OFFICE:
        return course.location or "In presenza"
    return "Online"


def lesson_description(course: CourseData, lesson: Lesson, index: int) -> str:
    total = len(course.parsed_calendar.lessons)
    return (
        f"Corso: {course.course_name}\n"
        f"Docente: {course.main_teacher}\n"
        f"Modalità: {lesson.location.value}\n"
        f"Lezione {index + 1} di {total}"
    )


def build_ics(course: CourseData, now: Optional[datetime] = None) -> str:
    """
    Return the calendar text, one VEVENT per lesson, CRLF line endings.
    """
    dtstamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%dT%H%M%SZ")

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//coursewizard//Course Calendar//IT")
    lines.append("CALSCALE:GREGORIAN")
    lines.append(f"X-WR-CALNAME:{_ics_escape(course.course_name)}")
    lines.append(
        f"X-WR-CALDESC:{_ics_escape(f'Calendario completo del corso {course.course_name} - {course.main_teacher}')}"
    )

    for index, lesson in enumerate(course.parsed_calendar.lessons):
        try:
            dtstart = _dt_local(lesson.date, lesson.start_time)
            dtend = _dt_local(lesson.date, lesson.end_time)
        except ValueError:
            continue

        uid = f"lesson-{course.section_id}-{index}@{UID_DOMAIN}"
        summary = f"{course.course_name} - {lesson.subject}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        lines.append(f"DESCRIPTION:{_ics_escape(lesson_description(course, lesson, index))}")
        lines.append(f"LOCATION:{_ics_escape(lesson_place(course, lesson))}")
        lines.append("STATUS:CONFIRMED")
        lines.append("SEQUENCE:0")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    return "\r\n".join(lines) + "\r\n"


def default_ics_filename(course: CourseData) -> str:
    return f"calendario_completo_{course.section_id or 'corso'}.ics"


def export_course_to_ics(course: CourseData, out_path: str | Path) -> int:
    """
    Write the course calendar to an .ics file. Returns number of exported lessons.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    text = build_ics(course)
    out.write_text(text, encoding="utf-8")
    return text.count("BEGIN:VEVENT")
