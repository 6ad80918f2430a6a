"""ksu.board -- kanban board parsing and board-to-item status sync."""

from .errors import FrontmatterError, KsuError, VaultPathError
from .frontmatter import BOARD_MARKER, is_board, parse_frontmatter, render_document, split_frontmatter
from .index import BoardIndex
from .parser import columns, parse_board
from .placement import ARCHIVE_STATUSES, PlacementResolver, placement_for
from .policy import DEFAULT_QUADRANTS, QUADRANT_STATUS, ColumnPolicy, resolve
from .store import VaultStore
from .sync import SyncEngine, needs_update
from .types import (
    BoardCard,
    EventKind,
    ItemChange,
    SyncReport,
    SyncState,
    TargetState,
    VaultEvent,
)

__all__ = [
    "KsuError",
    "FrontmatterError",
    "VaultPathError",
    "BOARD_MARKER",
    "is_board",
    "parse_frontmatter",
    "render_document",
    "split_frontmatter",
    "BoardIndex",
    "parse_board",
    "columns",
    "ARCHIVE_STATUSES",
    "PlacementResolver",
    "placement_for",
    "DEFAULT_QUADRANTS",
    "QUADRANT_STATUS",
    "ColumnPolicy",
    "resolve",
    "VaultStore",
    "SyncEngine",
    "needs_update",
    "BoardCard",
    "EventKind",
    "ItemChange",
    "SyncReport",
    "SyncState",
    "TargetState",
    "VaultEvent",
]
