"""
Course table parsing (pasted spreadsheet row -> course identity + schedule).

Expected layout, one header line followed by one course row:

    Corso  ProjectId  SectionId  Calendario  Docente  ...  Rendicontabile(col 9)

The calendar cell usually spans several lines (one lesson per line), so the
row continues on every following line that starts with a DD/MM/YYYY date.
A line right after that block which starts with a separator still belongs
to the row (the cells that follow the calendar); any other line ends it.

Cells are separated by TAB when the paste contains one, otherwise by runs
of two or more spaces (fixed width exports).
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from coursewizard.aggregate import aggregate
from coursewizard.clipboard import normalize_pasted_table
from coursewizard.model import CourseData, ParsedCourseTable
from coursewizard.schedule import lessons_to_text, parse_schedule_text


logger = logging.getLogger(__name__)

MIN_FIELDS = 4
CALENDAR_COLUMN = 3
TEACHER_COLUMN = 4
REPORTABLE_HOURS_COLUMN = 9

DATE_PREFIX = re.compile(r'^\s*"?\d{2}/\d{2}/\d{4}')
TAB_SEPARATOR = re.compile(r"\t")
SPACE_SEPARATOR = re.compile(r"[ \t]{2,}")
CONTINUATION_PREFIX = re.compile(r"^(\t| {2,})")


def _find_data_line(lines: List[str]) -> Optional[int]:
    # line 0 is the header
    for i in range(1, len(lines)):
        if not DATE_PREFIX.match(lines[i]):
            return i
    return None


def _collect_row(lines: List[str], start: int) -> List[str]:
    """
    Return the physical lines making up the course row that begins at `start`.
    """
    row = [lines[start]]
    j = start + 1
    while j < len(lines) and DATE_PREFIX.match(lines[j]):
        row.append(lines[j])
        j += 1

    if j < len(lines) and j > start + 1 and CONTINUATION_PREFIX.match(lines[j]):
        row.append(lines[j])

    return row


def split_row(row: List[str]) -> List[str]:
    """
    Split a (possibly multi-line) row into cells.

    With TAB separators the first cell of each continuation line extends the
    last cell of the previous line, the way a spreadsheet writes a cell
    containing line breaks. Fixed width exports put the whole calendar on
    the data line's columns, so there every continuation date line belongs
    to the calendar cell and any other continuation line adds cells.
    """
    if any("\t" in line for line in row):
        fields: List[str] = []
        for i, line in enumerate(row):
            cells = TAB_SEPARATOR.split(line)
            if i == 0 or not fields:
                fields.extend(cells)
                continue
            fields[-1] = f"{fields[-1]}\n{cells[0]}"
            fields.extend(cells[1:])
        return [cell.strip() for cell in fields]

    fields = SPACE_SEPARATOR.split(row[0].strip())
    for line in row[1:]:
        line = line.strip()
        if not DATE_PREFIX.match(line):
            fields.extend(SPACE_SEPARATOR.split(line))
        elif len(fields) > CALENDAR_COLUMN:
            fields[CALENDAR_COLUMN] = f"{fields[CALENDAR_COLUMN]}\n{line}"
        else:
            fields.append(line)
    return [cell.strip() for cell in fields]


def _unquote(cell: str) -> str:
    if len(cell) >= 2 and cell.startswith('"') and cell.endswith('"'):
        return cell[1:-1].strip()
    return cell


def _reportable_hours(fields: List[str]) -> Optional[int]:
    if len(fields) <= REPORTABLE_HOURS_COLUMN:
        return None
    match = re.search(r"\d+", fields[REPORTABLE_HOURS_COLUMN])
    return int(match.group(0)) if match else None


def parse_course_table(text: str) -> Optional[ParsedCourseTable]:
    """
    Parse a pasted course table.

    Returns None when the format is not recognized: no course row after the
    header, or fewer than four cells in it.
    """
    text = normalize_pasted_table(text or "")
    lines = [line.rstrip("\r") for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        logger.info("Course table has no data line")
        return None

    data_idx = _find_data_line(lines)
    if data_idx is None:
        logger.info("Course table: every line after the header starts with a date")
        return None

    fields = split_row(_collect_row(lines, data_idx))
    logger.debug("Course table cells: %r", fields)
    if len(fields) < MIN_FIELDS:
        logger.info("Course table row has %d cell(s), need %d", len(fields), MIN_FIELDS)
        return None

    parsed = ParsedCourseTable(
        course_name=fields[0],
        project_id=fields[1],
        section_id=fields[2],
        main_teacher=fields[TEACHER_COLUMN] if len(fields) > TEACHER_COLUMN else "",
        schedule_text=_unquote(fields[CALENDAR_COLUMN]),
        reportable_hours=_reportable_hours(fields),
    )
    logger.info(
        "Course table parsed: %s (project %s, section %s)",
        parsed.course_name,
        parsed.project_id,
        parsed.section_id,
    )
    return parsed


def apply_course_table(parsed: ParsedCourseTable, data: Optional[CourseData] = None) -> CourseData:
    """
    Return `data` updated with the parsed table: identity fields, lessons,
    calendar summary and the regenerated calendar text.
    """
    base = data if data is not None else CourseData()
    lessons = parse_schedule_text(parsed.schedule_text)

    return base.updated(
        course_name=parsed.course_name,
        project_id=parsed.project_id,
        section_id=parsed.section_id,
        main_teacher=parsed.main_teacher,
        reportable_hours=parsed.reportable_hours,
        calendar=lessons_to_text(lessons),
        parsed_calendar=aggregate(lessons),
    )
