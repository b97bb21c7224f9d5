"""
Schedule parsing (free text -> lessons).

Each non-blank line yields at most one lesson. Two line grammars are tried
in order:

    A  "Subject - DD/MM/YYYY HH:MM - HH:MM - Ufficio|Online"
    B  "DD/MM/YYYY HH:MM - HH:MM"   (anywhere in the line, legacy)

Grammar B has no subject or location: the lesson gets the default subject
and is held in the office. Lines matching neither grammar are dropped.
Output order is input order; nothing is sorted.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from coursewizard.model import DEFAULT_SUBJECT, Lesson, Location


logger = logging.getLogger(__name__)

# Longer lines are cut before matching so the lazy subject group stays cheap.
MAX_LINE_LENGTH = 500

_LOCATION_WORDS = "ufficio|office|presenza|aula|online|fad|remoto"

STRUCTURED_LINE = re.compile(
    r"^(?P<subject>.+?)\s*-\s*"
    r"(?P<date>\d{2}/\d{2}/\d{4})\s+"
    r"(?P<start>\d{2}:\d{2})\s*-\s*(?P<end>\d{2}:\d{2})\s*-\s*"
    rf"(?P<location>{_LOCATION_WORDS})\s*$",
    re.IGNORECASE,
)

LEGACY_LINE = re.compile(
    r"(?P<date>\d{2}/\d{2}/\d{4})\s+(?P<start>\d{2}:\d{2})\s*-\s*(?P<end>\d{2}:\d{2})"
)


def parse_schedule_line(line: str) -> Optional[Lesson]:
    """
    Parse exactly one schedule line into one lesson, or None.
    """
    raw = line.strip()
    if not raw:
        return None
    if len(raw) > MAX_LINE_LENGTH:
        logger.debug("Schedule line cut to %d characters: %r", MAX_LINE_LENGTH, raw[:60])
        raw = raw[:MAX_LINE_LENGTH]

    subject = DEFAULT_SUBJECT
    location = Location.OFFICE

    match = STRUCTURED_LINE.match(raw)
    if match:
        subject = match.group("subject").strip()
        location = Location.from_text(match.group("location")) or Location.OFFICE
    else:
        match = LEGACY_LINE.search(raw)
        if not match:
            return None

    try:
        # the regex only checks the shape; 31/02 or 25:70 must not get through
        datetime.strptime(match.group("date"), "%d/%m/%Y")
        return Lesson(
            subject=subject,
            date=match.group("date"),
            start_time=match.group("start"),
            end_time=match.group("end"),
            location=location,
        )
    except ValueError as exc:
        logger.debug("Skipping line with invalid date/time %r: %s", raw, exc)
        return None


def parse_schedule_text(text: str) -> List[Lesson]:
    """
    Parse a multi-line schedule block. Unrecognized lines are skipped.
    """
    lessons: List[Lesson] = []
    skipped = 0

    for line in (text or "").splitlines():
        if not line.strip():
            continue
        lesson = parse_schedule_line(line)
        if lesson is None:
            skipped += 1
            continue
        lessons.append(lesson)

    if skipped:
        logger.debug("Schedule parser dropped %d unrecognized line(s)", skipped)
    logger.info("Parsed %d lesson(s) from schedule text", len(lessons))
    return lessons


def format_lesson(lesson: Lesson) -> str:
    return f"{lesson.subject} - {lesson.date} {lesson.start_time} - {lesson.end_time} - {lesson.location.value}"


def lessons_to_text(lessons: Iterable[Lesson]) -> str:
    """Render lessons back into the structured calendar text, one per line."""
    return "\n".join(format_lesson(lesson) for lesson in lessons)
