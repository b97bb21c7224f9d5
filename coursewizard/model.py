"""
Central data model definitions used across the project.

This module defines the canonical structure of lessons, calendars,
participants and course data so that:
- all parsers produce the same field names
- exporters (iCalendar, links, contacts) consume one shape
- derived values (lesson hours, calendar totals) stay consistent
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, List, Optional

from coursewizard.duration import compute_hours


NOT_AVAILABLE = "N/A"
DEFAULT_SUBJECT = "Lezione"


class Location(str, Enum):
    """Where a lesson takes place: in the office (presence) or online (FAD)."""

    OFFICE = "Ufficio"
    ONLINE = "Online"

    @classmethod
    def from_text(cls, text: str) -> Optional["Location"]:
        key = (text or "").strip().lower()
        if key in _OFFICE_SPELLINGS:
            return cls.OFFICE
        if key in _ONLINE_SPELLINGS:
            return cls.ONLINE
        return None


_OFFICE_SPELLINGS = {"ufficio", "office", "presenza", "aula"}
_ONLINE_SPELLINGS = {"online", "fad", "remoto"}


class Benefits(str, Enum):
    YES = "SI"
    NO = "NO"

    @classmethod
    def from_text(cls, text: str) -> "Benefits":
        if (text or "").strip().lower() in _TRUTHY_SPELLINGS:
            return cls.YES
        return cls.NO


_TRUTHY_SPELLINGS = {"si", "sì", "sí", "s", "yes", "y", "true", "1", "x"}


@dataclass(frozen=True)
class Lesson:
    """
    Represents one scheduled class session.

    `date` and the times are kept as the original tokens (DD/MM/YYYY, HH:MM).
    `hours` is derived from the times and cannot be passed in.
    """

    subject: str
    date: str
    start_time: str
    end_time: str
    location: Location = Location.OFFICE
    hours: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hours", compute_hours(self.start_time, self.end_time, self.location))

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "date": self.date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "location": self.location.value,
            "hours": self.hours,
        }


@dataclass
class ParsedCalendar:
    """
    Summary over a list of lessons.

    Invariant: total_hours == presence_hours + online_hours.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_hours: float = 0.0
    presence_hours: float = 0.0
    online_hours: float = 0.0
    lessons: List[Lesson] = field(default_factory=list)

    @property
    def fad_hours(self) -> float:
        return self.online_hours

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "total_hours": self.total_hours,
            "presence_hours": self.presence_hours,
            "online_hours": self.online_hours,
            "lessons": [lesson.to_dict() for lesson in self.lessons],
        }


@dataclass
class Participant:
    """
    Represents one course enrollee.

    `id` is always the 1-based position in the current list.
    """

    id: int
    cognome: str = ""
    nome: str = ""
    genere: str = ""
    data_nascita: str = ""
    comune_nascita: str = ""
    prov_nascita: str = ""
    cittadinanza: str = ""
    codice_fiscale: str = ""
    titolo_studio: str = ""
    cellulare: str = ""
    email: str = ""
    comune_domicilio: str = ""
    prov_domicilio: str = ""
    indirizzo: str = ""
    cap: str = ""
    benefits: Benefits = Benefits.NO
    case_manager: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.nome} {self.cognome}".strip()

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["benefits"] = self.benefits.value
        return data


@dataclass
class ZoomData:
    link: str = ""
    meeting_id: str = ""
    passcode: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedCourseTable:
    """
    Result of parsing a pasted course table row.
    """

    course_name: str
    project_id: str
    section_id: str
    main_teacher: str
    schedule_text: str
    reportable_hours: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CourseInfo:
    """
    Course identity fields recovered from a PDF; unmatched fields hold NOT_AVAILABLE.
    """

    project_id: str = NOT_AVAILABLE
    section_id: str = NOT_AVAILABLE
    course_name: str = NOT_AVAILABLE
    location: str = NOT_AVAILABLE
    main_teacher: str = NOT_AVAILABLE
    start_date: str = NOT_AVAILABLE
    end_date: str = NOT_AVAILABLE

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ExtractedPDFData:
    """
    Everything recovered from one or more PDF documents. Sections that
    could not be recovered stay None.
    """

    lessons: Optional[List[Lesson]] = None
    course_info: Optional[CourseInfo] = None
    participants: Optional[List[Participant]] = None

    @property
    def total_hours(self) -> float:
        return sum(lesson.hours for lesson in self.lessons or [])

    def to_dict(self) -> dict[str, Any]:
        return {
            "lessons": [lesson.to_dict() for lesson in self.lessons] if self.lessons is not None else None,
            "total_hours": self.total_hours,
            "course_info": self.course_info.to_dict() if self.course_info else None,
            "participants": (
                [p.to_dict() for p in self.participants] if self.participants is not None else None
            ),
        }


@dataclass
class CourseData:
    """
    Top-level aggregate the wizard works on: identity, calendar and roster.
    """

    project_id: str = ""
    section_id: str = ""
    course_name: str = ""
    location: str = ""
    main_teacher: str = ""
    teacher_cf: str = ""
    operation: str = ""
    calendar: str = ""
    teacher_email: str = ""
    teacher_phone: str = ""
    zoom: Optional[ZoomData] = None
    reportable_hours: Optional[int] = None
    participants: List[Participant] = field(default_factory=list)
    parsed_calendar: ParsedCalendar = field(default_factory=ParsedCalendar)

    def updated(self, **changes: Any) -> "CourseData":
        """Return a copy with `changes` applied; the original is left untouched."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "section_id": self.section_id,
            "course_name": self.course_name,
            "location": self.location,
            "main_teacher": self.main_teacher,
            "teacher_cf": self.teacher_cf,
            "operation": self.operation,
            "calendar": self.calendar,
            "teacher_email": self.teacher_email,
            "teacher_phone": self.teacher_phone,
            "zoom": self.zoom.to_dict() if self.zoom else None,
            "reportable_hours": self.reportable_hours,
            "participants": [p.to_dict() for p in self.participants],
            "parsed_calendar": self.parsed_calendar.to_dict(),
        }
