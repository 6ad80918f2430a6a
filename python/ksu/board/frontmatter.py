"""YAML frontmatter extraction, parsing and rendering.

A document's metadata record is the YAML block fenced by ``---`` lines at
the very top of the file. Boards are documents whose frontmatter carries a
truthy ``kanban-plugin`` key.
"""

from __future__ import annotations

import yaml

BOARD_MARKER = "kanban-plugin"

_FENCE = "---"
_BOM = "\ufeff"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def split_frontmatter(content: str) -> tuple[str, str] | None:
    """Split a markdown string into (yaml_str, body).

    Returns None if the document does not open with a frontmatter fence
    or the fence is never closed.
    """
    lines = _strip_bom(content).splitlines(keepends=True)
    if not lines or not _is_fence(lines[0]):
        return None
    for idx in range(1, len(lines)):
        if _is_fence(lines[idx]):
            return "".join(lines[1:idx]), "".join(lines[idx + 1:])
    return None


def parse_frontmatter(content: str) -> dict | None:
    """Parse the frontmatter of a document into a dict.

    Returns None if there is no frontmatter, the YAML is invalid, or the
    block is not a mapping. An empty block yields an empty dict.
    """
    extracted = split_frontmatter(content)
    if extracted is None:
        return None
    data = _load_yaml(extracted[0])
    if data is _INVALID:
        return None
    return data


def load_for_update(content: str) -> tuple[dict, str] | None:
    """Return (metadata, body) ready for in-place mutation.

    Documents without frontmatter yield an empty dict and the full content
    as body. Returns None if a frontmatter block exists but cannot be
    parsed as a mapping, so callers never clobber it.
    """
    extracted = split_frontmatter(content)
    if extracted is None:
        return {}, _strip_bom(content)
    yaml_str, body = extracted
    data = _load_yaml(yaml_str)
    if data is _INVALID:
        return None
    return data, body


def render_document(metadata: dict, body: str, newline: str = "\n") -> str:
    """Render a metadata dict and body back into a markdown document.

    ``newline`` is used for the fences and the YAML lines; the body is
    written as given.
    """
    if metadata:
        dumped = yaml.safe_dump(
            metadata,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    else:
        dumped = ""
    if newline != "\n":
        dumped = dumped.replace("\n", newline)
    return f"{_FENCE}{newline}{dumped}{_FENCE}{newline}{body}"


def is_board(metadata: dict | None, marker: str = BOARD_MARKER) -> bool:
    """True if the metadata marks its document as a kanban board."""
    if not metadata:
        return False
    return bool(metadata.get(marker))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_INVALID = object()


def _strip_bom(content: str) -> str:
    return content[1:] if content.startswith(_BOM) else content


def _is_fence(line: str) -> bool:
    return line.rstrip() == _FENCE


def _load_yaml(yaml_str: str):
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError:
        return _INVALID
    if data is None:
        return {}
    if not isinstance(data, dict):
        return _INVALID
    return data
