"""KanbanStatusUpdater -- reacts to vault events and keeps items in sync.

Wires the board index, the sync engine and settings together and routes
document events the way the desktop plugin does:

- created / renamed: rebuild the board index
- deleted: drop the path from the index
- modified: sync the board, unless a sync is already in progress
"""

from __future__ import annotations

import logging
import threading

from .board.index import BoardIndex
from .board.sync import SyncEngine
from .board.types import EventKind, SyncReport, VaultEvent
from .settings import Settings

logger = logging.getLogger(__name__)


class KanbanStatusUpdater:
    """Event-driven host for the board sync core."""

    def __init__(self, store, settings: Settings | None = None, notifier=None) -> None:
        self.store = store
        self.settings = settings if settings is not None else Settings()
        self.index = BoardIndex(store)
        self.engine = SyncEngine(store, settings=self.settings, notifier=notifier)
        # Serializes event delivery from watcher threads. Re-entrant so a
        # host that delivers events synchronously from inside a write reaches
        # the SYNCING check instead of deadlocking. Watchdog events for the
        # engine's own writes arrive after the session is back to IDLE; a
        # board echoed that way gets one more pass that writes nothing.
        self._lock = threading.RLock()

    def load(self) -> int:
        """Index boards once the vault is available. Returns the board count."""
        return self.index_boards()

    def index_boards(self) -> int:
        with self._lock:
            count = self.index.register()
        self._log(f"Indexed {count} board(s)")
        return count

    # --- Event routing ---

    def dispatch(self, event: VaultEvent) -> SyncReport | None:
        """Route one vault event. Returns the sync report when a board was synced."""
        if event.kind is EventKind.MODIFIED:
            return self.on_modified(event.path)
        if event.kind is EventKind.CREATED:
            self.on_created(event.path)
        elif event.kind is EventKind.RENAMED:
            self.on_renamed(event.path, event.old_path)
        elif event.kind is EventKind.DELETED:
            self.on_deleted(event.path)
        return None

    def on_created(self, path: str) -> None:
        self.index_boards()

    def on_renamed(self, path: str, old_path: str | None = None) -> None:
        self.index_boards()

    def on_deleted(self, path: str) -> None:
        with self._lock:
            self.index.forget(path)

    def on_modified(self, path: str) -> SyncReport | None:
        with self._lock:
            if not self.engine.is_idle:
                return None
            if not self.index.is_board(path):
                # Board content may land after its create event
                if not self.index.refresh(path):
                    return None
                self._log(f"Indexed new board {path}")
            return self.sync_board(path)

    # --- Sync ---

    def sync_board(self, path: str) -> SyncReport | None:
        """Sync one board. Read failures are logged and yield None."""
        with self._lock:
            try:
                report = self.engine.sync_board(path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Could not read board %s: %s", path, exc)
                return None
        if report.changes:
            self._log(f"Synced {path}: {len(report.changes)} item(s) updated")
        return report

    def sync_all(self) -> list[SyncReport]:
        reports: list[SyncReport] = []
        for path in list(self.index):
            report = self.sync_board(path)
            if report is not None:
                reports.append(report)
        return reports

    def _log(self, message: str) -> None:
        if self.settings.debug_mode:
            logger.info(message)
        else:
            logger.debug(message)
