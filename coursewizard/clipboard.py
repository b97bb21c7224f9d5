"""
Clipboard helpers.

Tables copied from a browser often arrive as HTML instead of tab separated
text. These helpers turn such a table back into the TSV layout the parsers
expect: one row per line, cells joined by TAB, line breaks inside a cell
kept as newlines.
"""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup


def looks_like_html(text: str) -> bool:
    head = (text or "").lstrip()[:2000].lower()
    return "<table" in head or "<tr" in head


def html_table_to_text(html: str) -> str:
    """
    Convert the first HTML table in `html` to tab separated text.
    Returns "" when there is no table.
    """
    soup = BeautifulSoup(html, "html.parser")

    table = soup.find("table")
    if not table:
        return ""

    rows: List[str] = []
    for row in table.select("tr"):
        cells = row.find_all(["td", "th"])
        if not cells:
            continue
        values = [cell.get_text("\n", strip=True) for cell in cells]
        rows.append("\t".join(values))

    return "\n".join(rows)


def normalize_pasted_table(text: str) -> str:
    """
    Return `text` unchanged unless it is an HTML table, in which case return its TSV form.
    """
    if looks_like_html(text):
        return html_table_to_text(text)
    return text
