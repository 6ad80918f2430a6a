"""Value types shared by the parser, policy, engine and plugin host."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum


class SyncState(Enum):
    IDLE = "idle"
    SYNCING = "syncing"


class EventKind(Enum):
    CREATED = "created"
    MODIFIED = "modified"
    RENAMED = "renamed"
    DELETED = "deleted"


@dataclass(frozen=True)
class BoardCard:
    """One card reference found under a column heading."""

    column: str
    target: str


@dataclass(frozen=True)
class TargetState:
    """Metadata a card's item should carry given the column it sits in.

    ``urgent`` and ``important`` are ``None`` for plain status columns,
    meaning existing values are left alone.
    """

    status: str
    urgent: bool | None = None
    important: bool | None = None

    @property
    def is_quadrant(self) -> bool:
        return self.urgent is not None and self.important is not None


@dataclass(frozen=True)
class VaultEvent:
    kind: EventKind
    path: str
    old_path: str | None = None


@dataclass
class ItemChange:
    """A metadata write performed for one item during a sync."""

    path: str
    old_status: object
    new_status: str
    urgent: bool | None = None
    important: bool | None = None
    moved_to: str | None = None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "old_status": self.old_status,
            "new_status": self.new_status,
            "urgent": self.urgent,
            "important": self.important,
            "moved_to": self.moved_to,
        }


@dataclass
class SyncReport:
    """Outcome of one board sync."""

    board: str
    changes: list[ItemChange] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "board": self.board,
            "changes": [c.to_dict() for c in self.changes],
            "skipped": list(self.skipped),
            "unresolved": list(self.unresolved),
            "errors": [{"target": t, "message": m} for t, m in self.errors],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)
