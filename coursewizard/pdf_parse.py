"""
Heuristic parsing of text extracted from the official course PDFs.

Three documents are understood, alone or concatenated into one text:

- the start-of-section letter ("Spett. ..."): course identity
- the roster ("ELENCO ALLIEVI" / "ID STUDENTE COGNOME NOME ..."): participants
- the section calendar ("CALENDARIO SEZIONE"): lessons

Every field is resolved by an ordered rule table. Rules are tried top to
bottom and the first one that matches wins; a field nobody matches keeps
the NOT_AVAILABLE sentinel. Nothing in here raises on odd input: a
section that cannot be read comes back empty.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from coursewizard.aggregate import aggregate
from coursewizard.duration import time_to_minutes
from coursewizard.model import (
    NOT_AVAILABLE,
    Benefits,
    CourseData,
    CourseInfo,
    ExtractedPDFData,
    Lesson,
    Location,
    Participant,
)
from coursewizard.participants import renumber
from coursewizard.pdf_extract import MAX_TEXT_LENGTH, PdfSource, extract_text
from coursewizard.schedule import lessons_to_text, parse_schedule_text


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """One named pattern; group 1 is the field value."""

    name: str
    pattern: Pattern[str]


def _rule(name: str, pattern: str, flags: int = re.IGNORECASE) -> FieldRule:
    return FieldRule(name, re.compile(pattern, flags))


# Stops a free-text value at the next label or at the end of the line.
_VALUE_END = r"(?=\s+(?:ID|SEDE|DURATA|DATA|TIPOLOGIA|TITOLO|DOCENTE|DENOMINAZIONE)\b|[ \t]*(?:\n|$))"
_NAME_VALUE = r"([^\W\d_](?:[^\W\d_]|[' ]){2,59}?)"

COURSE_INFO_RULES: Dict[str, Tuple[FieldRule, ...]] = {
    "project_id": (
        _rule("id_corso", r"ID\s*CORSO[:\s]*(\d+)"),
        _rule("corso", r"CORSO[:\s]*(\d+)"),
        _rule("progetto", r"PROGETTO[:\s]*(\d+)"),
    ),
    "section_id": (
        _rule("id_sezione", r"ID\s*SEZIONE[:\s]*(\d+)"),
        _rule("sezione", r"SEZIONE[:\s]*(\d+)"),
    ),
    "course_name": (
        _rule("pal_gol", r"(PAL[\s\-]*GOL)"),
        _rule("tipologia_percorso", r"TIPOLOGIA\s*PERCORSO[ \t]*:?[ \t]*([^\n]{3,80}?)" + _VALUE_END),
        _rule("titolo_percorso", r"TITOLO\s*PERCORSO[ \t]*:?[ \t]*([^\n]{3,80}?)" + _VALUE_END),
        _rule("denominazione", r"DENOMINAZIONE(?!\s+ISTITUZIONE)[ \t]*:?[ \t]*([^\n]{3,80}?)" + _VALUE_END),
        _rule("percorso", r"PERCORSO[ \t]*:?[ \t]*([^\n]{3,80}?)" + _VALUE_END),
    ),
    "location": (
        _rule("sede", r"\bSEDE[ \t]*:?[ \t]*([^\n]{2,200}?)(?=\s+(?:ID|DATA|DENOMINAZIONE)\b|[ \t]*(?:\n|$))"),
        _rule(
            "istituzione_formativa",
            r"ISTITUZIONE\s*FORMATIVA[ \t]*:?[ \t]*([^\n]{2,200}?)(?=\s+(?:ID|DATA)\b|[ \t]*(?:\n|$))",
        ),
    ),
    "main_teacher": (
        _rule("docente", r"DOCENTE[ \t]*:?[ \t]*" + _NAME_VALUE + r"(?=\s+(?:ID|DATA|SEDE)\b|[ \t]*(?:\n|$))"),
        _rule("insegnante", r"INSEGNANTE[ \t]*:?[ \t]*" + _NAME_VALUE + r"(?=\s+(?:ID|DATA|SEDE)\b|[ \t]*(?:\n|$))"),
    ),
    "start_date": (
        _rule("data_avvio_prevista", r"DATA\s*AVVIO\s*PREVISTA[:\s]*(\d{2}/\d{2}/\d{4})"),
        _rule("data_inizio", r"DATA\s*(?:DI\s*)?INIZIO[:\s]*(\d{2}/\d{2}/\d{4})"),
    ),
    "end_date": (
        _rule("data_fine_prevista", r"DATA\s*FINE\s*PREVISTA[:\s]*(\d{2}/\d{2}/\d{4})"),
        _rule("data_fine", r"DATA\s*(?:DI\s*)?FINE[:\s]*(\d{2}/\d{2}/\d{4})"),
    ),
}

LOCATION_NOISE = re.compile(r"\s*(?:Rappresentante|Temporanea|Codice|\bCF\b)", re.IGNORECASE)
MAX_LOCATION_LENGTH = 100

ROSTER_HEADER = re.compile(
    r"ID\s+STUDENTE\s+COGNOME\s+NOME\s+CODICE\s+FISCALE\s+RESIDENZA\s+",
    re.IGNORECASE,
)
ROSTER_END = re.compile(r"CALENDARIO|Spett\.", re.IGNORECASE)

_WORD = r"[A-Za-zÀ-ÖØ-öø-ÿ']+"
ROSTER_RECORD = re.compile(
    rf"(?P<student_id>\d+)\s+(?P<surname>{_WORD})\s+(?P<name>{_WORD}(?: {_WORD})?)\s+"
    r"(?P<fiscal_code>[A-Z0-9]{16})\s+"
    r"(?P<address>.+?)"
    r"(?=\s+\d+\s+\S+\s+\S+(?:\s+\S+)?\s+[A-Z0-9]{16}(?:\s|$)|\s*$)",
    re.DOTALL,
)

TOKEN_ID = re.compile(r"^\d+$")
TOKEN_NAME = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ']+$")
TOKEN_FISCAL_CODE = re.compile(r"^[A-Z0-9]{16}$")
MAX_ADDRESS_TOKENS = 10

CAP_PATTERN = re.compile(r"\b(\d{5})\b")
CITY_WITH_PROVINCE_CODE = re.compile(r",\s*([A-Za-zÀ-ÿ' ]+?)\s*\(([A-Z]{2})\)\s*$")
CITY_COMMA_PROVINCE = re.compile(r",\s*([A-Za-zÀ-ÿ' ]+?)\s*,\s*([A-Za-zÀ-ÿ' ]+?)(?:\s*\([A-Z]{2}\))?\s*$")

CALENDAR_TABLE_ROW = re.compile(
    r"(?P<date>\d{2}/\d{2}/\d{4})\s+(?P<start>\d{2}:\d{2})\s+(?P<end>\d{2}:\d{2})\s+"
    r"(?P<total>\d{2}:\d{2})\s+(?P<kind>[A-Za-z]+)"
)
ONLINE_SUBJECT = "Formazione a Distanza"
OFFICE_SUBJECT = "Lezione"

SECTION_PATTERNS: Dict[str, Pattern[str]] = {
    "participants": re.compile(r"ELENCO ALLIEVI(.*?)(?=CALENDARIO SEZIONE|Spett\.|$)", re.IGNORECASE | re.DOTALL),
    "calendar": re.compile(r"CALENDARIO SEZIONE(.*?)(?=Spett\.|Documento firmato|$)", re.IGNORECASE | re.DOTALL),
    "course_info": re.compile(r"(Spett\..*?)(?=Documento firmato|$)", re.IGNORECASE | re.DOTALL),
}


def _bounded(text: str) -> str:
    return (text or "")[:MAX_TEXT_LENGTH]


# ---------------------------------------------------------------------------
# Course information
# ---------------------------------------------------------------------------


def first_match(text: str, rules: Sequence[FieldRule]) -> Optional[Tuple[str, str]]:
    """
    Return (rule name, value) for the first rule matching `text`, or None.
    """
    for rule in rules:
        match = rule.pattern.search(text)
        if match:
            value = " ".join(match.group(1).split())
            if value:
                return rule.name, value
    return None


def extract_course_info(
    text: str,
    rules: Optional[Mapping[str, Sequence[FieldRule]]] = None,
) -> CourseInfo:
    """
    Resolve every course field through its rule table; misses stay N/A.
    """
    text = _bounded(text)
    table = rules if rules is not None else COURSE_INFO_RULES
    info = CourseInfo()

    for field_name, field_rules in table.items():
        hit = first_match(text, field_rules)
        if hit is None:
            logger.debug("Course info: no rule matched %s", field_name)
            continue
        rule_name, value = hit
        logger.debug("Course info: %s = %r (rule %s)", field_name, value, rule_name)
        setattr(info, field_name, value)

    logger.info("Course info extracted: project %s, section %s", info.project_id, info.section_id)
    return info


def clean_course_info(info: CourseInfo) -> CourseInfo:
    """
    Drop the usual trailing noise from the letter's location and course name.
    """
    course_name = info.course_name
    if course_name != NOT_AVAILABLE:
        pal_gol = re.search(r"PAL[\s\-]+GOL", course_name, re.IGNORECASE)
        if pal_gol:
            course_name = pal_gol.group(0)

    location = info.location
    if location != NOT_AVAILABLE:
        location = LOCATION_NOISE.split(location, maxsplit=1)[0].strip(" ,-")
        if len(location) > MAX_LOCATION_LENGTH:
            cut = location[:MAX_LOCATION_LENGTH]
            location = cut[: cut.rfind(",")] if "," in cut else cut
            location = location.strip(" ,-")
        location = location or NOT_AVAILABLE

    return CourseInfo(
        project_id=info.project_id,
        section_id=info.section_id,
        course_name=course_name,
        location=location,
        main_teacher=info.main_teacher,
        start_date=info.start_date,
        end_date=info.end_date,
    )


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------


def parse_address(address: str) -> Tuple[str, str, str, str]:
    """
    Split a free-text residence into (street, city, province, cap).
    Missing parts come back as "".
    """
    address = " ".join((address or "").split())
    parts = [p.strip() for p in address.split(",") if p.strip()]

    street = parts[0] if parts else ""
    cap_match = CAP_PATTERN.search(address)
    cap = cap_match.group(1) if cap_match else ""

    city = ""
    province = ""
    match = CITY_WITH_PROVINCE_CODE.search(address) or CITY_COMMA_PROVINCE.search(address)
    if match:
        city = match.group(1).strip()
        province = match.group(2).strip()
    elif len(parts) >= 2:
        city = parts[-1]

    return street, city, province, cap


def _roster_participant(position: int, surname: str, name: str, fiscal_code: str, address: str) -> Participant:
    street, city, province, cap = parse_address(address)
    return Participant(
        id=position,
        cognome=surname.strip(),
        nome=" ".join(name.split()),
        cittadinanza="Italiana",
        codice_fiscale=fiscal_code,
        comune_domicilio=city,
        prov_domicilio=province,
        indirizzo=street,
        cap=cap,
        benefits=Benefits.NO,
    )


def roster_section(text: str) -> Optional[str]:
    """
    Return the student rows following the roster header, or None without a header.
    """
    header = ROSTER_HEADER.search(text)
    if not header:
        return None
    rest = text[header.end():]
    end = ROSTER_END.search(rest)
    return (rest[: end.start()] if end else rest).strip()


def match_roster_records(student_data: str) -> List[Participant]:
    participants: List[Participant] = []
    for match in ROSTER_RECORD.finditer(student_data):
        participants.append(
            _roster_participant(
                len(participants) + 1,
                match.group("surname"),
                match.group("name"),
                match.group("fiscal_code"),
                match.group("address"),
            )
        )
    return participants


def scan_roster_tokens(student_data: str) -> List[Participant]:
    """
    Token walk for rosters the record pattern cannot read: look for
    id, surname, name, fiscal code in four consecutive tokens, then take up
    to MAX_ADDRESS_TOKENS non-numeric tokens as the address.
    """
    tokens = student_data.split()
    participants: List[Participant] = []

    i = 0
    while i < len(tokens) - 4:
        student_id, surname, name, fiscal_code = tokens[i : i + 4]
        if not (
            TOKEN_ID.match(student_id)
            and TOKEN_NAME.match(surname)
            and TOKEN_NAME.match(name)
            and TOKEN_FISCAL_CODE.match(fiscal_code)
        ):
            i += 1
            continue

        address_tokens: List[str] = []
        j = i + 4
        while j < len(tokens) and not TOKEN_ID.match(tokens[j]) and len(address_tokens) < MAX_ADDRESS_TOKENS:
            address_tokens.append(tokens[j])
            j += 1

        participants.append(
            _roster_participant(len(participants) + 1, surname, name, fiscal_code, " ".join(address_tokens))
        )
        i = max(j, i + 1)

    return participants


def extract_participants(text: str) -> List[Participant]:
    """
    Read the roster: record pattern first, token scan when it finds nobody.
    """
    student_data = roster_section(_bounded(text))
    if student_data is None:
        logger.info("Roster header not found")
        return []

    participants = match_roster_records(student_data)
    if not participants:
        logger.warning("Roster record pattern found nobody; scanning tokens")
        participants = scan_roster_tokens(student_data)

    logger.info("Roster: %d participant(s)", len(participants))
    return participants


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def _table_lesson(match: "re.Match[str]") -> Optional[Lesson]:
    online = match.group("kind").upper() == "FAD"
    try:
        datetime.strptime(match.group("date"), "%d/%m/%Y")
        lesson = Lesson(
            subject=ONLINE_SUBJECT if online else OFFICE_SUBJECT,
            date=match.group("date"),
            start_time=match.group("start"),
            end_time=match.group("end"),
            location=Location.ONLINE if online else Location.OFFICE,
        )
        declared = time_to_minutes(match.group("total")) / 60
    except ValueError:
        return None

    if abs(declared - lesson.hours) > 1e-9:
        logger.debug(
            "Calendar row %s %s-%s declares %.2f h, computed %.2f h",
            lesson.date,
            lesson.start_time,
            lesson.end_time,
            declared,
            lesson.hours,
        )
    return lesson


def parse_calendar_table(text: str) -> List[Lesson]:
    """
    Read "DATE FROM TO TOTAL TYPE" rows of the section calendar table.
    """
    lessons: List[Lesson] = []
    for match in CALENDAR_TABLE_ROW.finditer(text):
        lesson = _table_lesson(match)
        if lesson is not None:
            lessons.append(lesson)
    return lessons


def extract_calendar(text: str) -> Optional[List[Lesson]]:
    """
    Lessons from calendar text: schedule lines first, the calendar table
    layout second. None when neither yields anything.
    """
    text = _bounded(text)
    lessons = parse_schedule_text(text)
    if lessons:
        return lessons

    logger.warning("No schedule lines found; trying calendar table rows")
    lessons = parse_calendar_table(text)
    return lessons or None


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def split_combined_text(text: str) -> Dict[str, str]:
    """
    Cut a concatenation of the three documents into its sections.
    Only sections actually present are returned.
    """
    sections: Dict[str, str] = {}
    for name, pattern in SECTION_PATTERNS.items():
        match = pattern.search(text)
        if match and match.group(1).strip():
            sections[name] = match.group(1).strip()
            logger.debug("Found %s section (%d chars)", name, len(sections[name]))
    return sections


def parse_combined_text(text: str) -> ExtractedPDFData:
    """
    Parse the three documents pasted or extracted as one text block.
    """
    text = _bounded(text)
    sections = split_combined_text(text)
    result = ExtractedPDFData()

    if "participants" in sections:
        result.participants = extract_participants(sections["participants"]) or None

    if "calendar" in sections:
        result.lessons = extract_calendar(sections["calendar"])

    info_text = (
        sections.get("course_info") or sections.get("participants") or sections.get("calendar") or text
    )
    result.course_info = extract_course_info(info_text)
    return result


def process_documents(
    calendar: Optional[PdfSource] = None,
    course_info: Optional[PdfSource] = None,
    participants: Optional[PdfSource] = None,
    mock_texts: Optional[Mapping[Tuple[str, ...], str]] = None,
) -> ExtractedPDFData:
    """
    Extract and parse each given PDF on its own. Documents are read one
    after the other, in the order calendar, course info, participants.
    """
    result = ExtractedPDFData()

    if calendar is not None:
        result.lessons = extract_calendar(extract_text(calendar, mock_texts=mock_texts))

    if course_info is not None:
        result.course_info = extract_course_info(extract_text(course_info, mock_texts=mock_texts))

    if participants is not None:
        result.participants = extract_participants(extract_text(participants, mock_texts=mock_texts)) or None

    return result


def to_course_data(extracted: ExtractedPDFData, base: Optional[CourseData] = None) -> CourseData:
    """
    Merge what the PDFs yielded into course data. Fields the PDFs did not
    resolve (still N/A) leave the existing values alone.
    """
    data = base if base is not None else CourseData()
    changes: Dict[str, object] = {}

    if extracted.course_info is not None:
        info = clean_course_info(extracted.course_info)
        for name in ("project_id", "section_id", "course_name", "location", "main_teacher"):
            value = getattr(info, name)
            if value != NOT_AVAILABLE:
                changes[name] = value

    if extracted.lessons:
        changes["calendar"] = lessons_to_text(extracted.lessons)
        changes["parsed_calendar"] = aggregate(extracted.lessons)

    if extracted.participants:
        changes["participants"] = renumber(extracted.participants)

    return data.updated(**changes)
