"""
Participant table parsing and roster ordering.

Pasted rosters are tab separated, 13 nominal columns:

    0 N.  1 Nome e cognome  2 Codice fiscale  3 Genere  4 Data di nascita
    5 Cellulare  6 Email  7 Comune di domicilio  8 Case manager  9 Benefits
    10 Titolo di studio  11 Indirizzo  12 CAP

Rows with fewer than 10 cells are ignored. The full name is split on the
first space: the first word is the given name, the rest is the surname.
Documents downstream rely on this exact split.

Participant ids are positions: every reorder renumbers the whole list.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Sequence

from coursewizard.clipboard import normalize_pasted_table
from coursewizard.model import Benefits, Participant


logger = logging.getLogger(__name__)

MIN_COLUMNS = 10

COL_FULL_NAME = 1
COL_FISCAL_CODE = 2
COL_GENDER = 3
COL_BIRTH_DATE = 4
COL_PHONE = 5
COL_EMAIL = 6
COL_CITY = 7
COL_CASE_MANAGER = 8
COL_BENEFITS = 9
COL_EDUCATION = 10
COL_ADDRESS = 11
COL_CAP = 12

# Only the leading label cells (N., full name) are compared, and compared whole:
# a benefits "N" or an email containing "id" must not hide a row.
HEADER_LABEL_COLUMNS = 2
HEADER_CELLS = {
    "id",
    "n.",
    "n",
    "nr",
    "nome",
    "cognome",
    "nome e cognome",
    "nominativo",
    "codice fiscale",
    "cf",
    "cellulare",
    "email",
    "mail",
    "case manager",
    "benefits",
}
FOOTER_LINE = re.compile(r"^\s*(totale\b|\d+\s+(righe|record|partecipanti)\b)", re.IGNORECASE)


def is_header_or_footer(line: str) -> bool:
    if FOOTER_LINE.search(line):
        return True
    cells = [cell.strip().lower() for cell in line.split("\t")][:HEADER_LABEL_COLUMNS]
    return any(cell in HEADER_CELLS for cell in cells)


def split_full_name(full_name: str) -> tuple[str, str]:
    """
    Return (nome, cognome) for "Mario De Rossi" -> ("Mario", "De Rossi").
    """
    parts = full_name.strip().split(" ", 1)
    nome = parts[0]
    cognome = parts[1].strip() if len(parts) > 1 else ""
    return nome, cognome


def _cell(columns: Sequence[str], index: int) -> str:
    return columns[index] if index < len(columns) else ""


def parse_participant_row(columns: Sequence[str], position: int) -> Participant:
    nome, cognome = split_full_name(_cell(columns, COL_FULL_NAME))
    return Participant(
        id=position,
        nome=nome,
        cognome=cognome,
        codice_fiscale=_cell(columns, COL_FISCAL_CODE).upper(),
        genere=_cell(columns, COL_GENDER),
        data_nascita=_cell(columns, COL_BIRTH_DATE),
        cellulare=_cell(columns, COL_PHONE),
        email=_cell(columns, COL_EMAIL),
        comune_domicilio=_cell(columns, COL_CITY),
        case_manager=_cell(columns, COL_CASE_MANAGER),
        benefits=Benefits.from_text(_cell(columns, COL_BENEFITS)),
        titolo_studio=_cell(columns, COL_EDUCATION),
        indirizzo=_cell(columns, COL_ADDRESS),
        cap=_cell(columns, COL_CAP),
    )


def parse_participants(text: str) -> List[Participant]:
    """
    Parse a pasted roster. Header, footer and short rows are skipped.
    """
    text = normalize_pasted_table(text or "")
    participants: List[Participant] = []

    for line in text.splitlines():
        if not line.strip() or is_header_or_footer(line):
            continue

        columns = [col.strip() for col in line.split("\t")]
        if len(columns) < MIN_COLUMNS:
            logger.debug("Skipping roster line with %d column(s): %r", len(columns), line)
            continue

        participants.append(parse_participant_row(columns, len(participants) + 1))

    logger.info("Parsed %d participant(s)", len(participants))
    return participants


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def renumber(participants: Sequence[Participant]) -> List[Participant]:
    """Return copies whose ids match their 1-based positions."""
    return [replace(p, id=i) for i, p in enumerate(participants, start=1)]


def _check_position(participants: Sequence[Participant], position: int) -> None:
    if not (1 <= position <= len(participants)):
        raise IndexError(f"Position {position} out of range 1..{len(participants)}")


def swap_participants(participants: Sequence[Participant], a: int, b: int) -> List[Participant]:
    """
    Swap the participants at 1-based positions `a` and `b`.
    """
    _check_position(participants, a)
    _check_position(participants, b)
    out = list(participants)
    out[a - 1], out[b - 1] = out[b - 1], out[a - 1]
    return renumber(out)


def move_participant(participants: Sequence[Participant], from_pos: int, to_pos: int) -> List[Participant]:
    """
    Move one participant to a new 1-based position (drag and drop); the others shift.
    """
    _check_position(participants, from_pos)
    _check_position(participants, to_pos)
    out = list(participants)
    moved = out.pop(from_pos - 1)
    out.insert(to_pos - 1, moved)
    return renumber(out)
