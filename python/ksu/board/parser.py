"""Board text parsing.

Turns the markdown of a kanban board into an ordered list of
(column, card target) pairs. Parsing never fails: lines that are neither
column headings nor card references are skipped.
"""

from __future__ import annotations

import re

from .types import BoardCard

_HEADING_RE = re.compile(r"^## (.+)$")
_LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_board(content: str) -> list[BoardCard]:
    """Extract (column, target) pairs from board text in document order.

    A ``## `` heading opens a column; each following line with a
    ``[[link]]`` yields one card for that column (first link on the line
    only). Lines before the first heading are ignored.
    """
    cards: list[BoardCard] = []
    current_column: str | None = None

    for line in content.split("\n"):
        column = _parse_column_heading(line)
        if column is not None:
            current_column = column
            continue
        if current_column:
            target = _parse_card_target(line)
            if target is not None:
                cards.append(BoardCard(column=current_column, target=target))

    return cards


def columns(content: str) -> list[str]:
    """List column names in the order they appear on the board."""
    names: list[str] = []
    for line in content.split("\n"):
        column = _parse_column_heading(line)
        if column is not None:
            names.append(column)
    return names


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_column_heading(line: str) -> str | None:
    match = _HEADING_RE.match(line.rstrip("\r"))
    if match is None:
        return None
    return match.group(1).strip()


def _parse_card_target(line: str) -> str | None:
    match = _LINK_RE.search(line)
    if match is None:
        return None
    return match.group(1)
