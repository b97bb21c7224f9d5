"""
Quick-contact helpers for the participant list: WhatsApp links, one email
to everybody, and vCards.
"""

from __future__ import annotations

import re
from typing import Sequence
from urllib.parse import quote

from coursewizard.model import Participant


ITALY_PREFIX = "39"


def normalize_phone(phone: str) -> str:
    """
    Italian number to international digits: "347 123 4567" -> "393471234567".
    Returns "" when there are no digits.
    """
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return ""
    if digits.startswith(ITALY_PREFIX):
        return digits
    if digits.startswith("0"):
        return ITALY_PREFIX + digits[1:]
    return ITALY_PREFIX + digits


def whatsapp_link(phone: str, name: str, course_name: str) -> str:
    number = normalize_phone(phone)
    if not number:
        return ""
    message = quote(f'Ciao {name}, ti scrivo riguardo al corso "{course_name}"', safe="")
    return f"https://wa.me/{number}?text={message}"


def valid_emails(participants: Sequence[Participant]) -> list[str]:
    return [p.email for p in participants if p.email and "@" in p.email]


def bulk_mailto(participants: Sequence[Participant], course_name: str) -> str:
    subject = quote(f"Corso: {course_name}", safe="")
    body = quote(
        f'Gentili corsisti,\n\nVi scrivo riguardo al corso "{course_name}".\n\nCordiali saluti',
        safe="",
    )
    return f"mailto:{','.join(valid_emails(participants))}?subject={subject}&body={body}"


def vcard(participant: Participant, course_name: str) -> str:
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{participant.nome} {participant.cognome}",
        f"N:{participant.cognome};{participant.nome};;;",
    ]
    if participant.email:
        lines.append(f"EMAIL:{participant.email}")
    if participant.cellulare:
        lines.append(f"TEL;TYPE=CELL:{participant.cellulare}")
    lines.append(f"NOTE:Corso: {course_name}")
    lines.append("END:VCARD")
    return "\n".join(lines)
