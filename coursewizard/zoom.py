"""
Zoom invitation parsing.

Pulls the meeting link, meeting id and passcode out of a pasted Zoom
invitation (Italian or English wording).
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from coursewizard.model import ZoomData


logger = logging.getLogger(__name__)

LINK_PATTERN = re.compile(r"https://\S+")

MEETING_ID_PATTERNS = (
    re.compile(r"ID riunione:\s*(\d{3}\s\d{4}\s\d{4})", re.IGNORECASE),
    re.compile(r"ID riunione:\s*(\d{3}-\d{4}-\d{4})", re.IGNORECASE),
    re.compile(r"ID riunione:\s*(\d{11})", re.IGNORECASE),
    re.compile(r"(\d{3}\s\d{4}\s\d{4})"),
    re.compile(r"(\d{3}-\d{4}-\d{4})"),
    re.compile(r"(\d{11})"),
)

PASSCODE_PATTERNS = (
    re.compile(r"Passcode:\s*(\w+)", re.IGNORECASE),
    re.compile(r"Password:\s*(\w+)", re.IGNORECASE),
    re.compile(r"Codice:\s*(\w+)", re.IGNORECASE),
)


def _first_group(text: str, patterns) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return ""


def parse_zoom_data(text: str) -> Optional[ZoomData]:
    """
    Parse a Zoom invitation. None when it has neither a link nor a meeting id.
    """
    if not (text or "").strip():
        return None

    link_match = LINK_PATTERN.search(text)
    zoom = ZoomData(
        link=link_match.group(0) if link_match else "",
        meeting_id=_first_group(text, MEETING_ID_PATTERNS),
        passcode=_first_group(text, PASSCODE_PATTERNS),
    )
    logger.debug("Parsed Zoom data: %r", zoom)

    if not zoom.link and not zoom.meeting_id:
        return None
    return zoom


def format_zoom_data(zoom: ZoomData) -> str:
    return f"Link: {zoom.link}\nID riunione: {zoom.meeting_id}\nPasscode: {zoom.passcode}"
