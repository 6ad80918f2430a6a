"""Vault watcher -- turns filesystem events into VaultEvents.

Uses a recursive watchdog observer on the vault root. Only markdown files
outside dot-directories are reported; directory moves are reported too so
the board index can be rebuilt.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .board.store import MARKDOWN_SUFFIX
from .board.types import EventKind, VaultEvent

logger = logging.getLogger(__name__)


class VaultEventHandler(FileSystemEventHandler):
    """Translates watchdog events for one vault and forwards them."""

    def __init__(self, root: Path | str, callback: Callable[[VaultEvent], object]):
        self.root = Path(root).resolve()
        self.callback = callback

    def on_any_event(self, fs_event: FileSystemEvent) -> None:
        event = self.translate(fs_event)
        if event is None:
            return
        try:
            self.callback(event)
        except Exception:
            logger.exception("Error handling %s %s", event.kind.value, event.path)

    def translate(self, fs_event: FileSystemEvent) -> Optional[VaultEvent]:
        """Map a watchdog event to a VaultEvent, or None if irrelevant."""
        src = self._relative(fs_event.src_path)
        dest = self._relative(getattr(fs_event, "dest_path", "") or "")

        if fs_event.event_type == "moved":
            if fs_event.is_directory:
                if dest is None or _hidden(dest):
                    return None
                return VaultEvent(EventKind.RENAMED, dest, src)
            dest_ok = dest is not None and _tracked(dest)
            src_ok = src is not None and _tracked(src)
            if dest_ok and src_ok:
                return VaultEvent(EventKind.RENAMED, dest, src)
            if dest_ok:
                # Atomic save: temp file replaced onto the document
                return VaultEvent(EventKind.MODIFIED, dest)
            if src_ok:
                return VaultEvent(EventKind.DELETED, src)
            return None

        if fs_event.is_directory or src is None or not _tracked(src):
            return None
        if fs_event.event_type == "created":
            return VaultEvent(EventKind.CREATED, src)
        if fs_event.event_type == "modified":
            return VaultEvent(EventKind.MODIFIED, src)
        if fs_event.event_type == "deleted":
            return VaultEvent(EventKind.DELETED, src)
        return None

    def _relative(self, path) -> Optional[str]:
        if not path:
            return None
        if isinstance(path, bytes):
            path = path.decode()
        try:
            return Path(path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return None


class VaultWatcher:
    """Runs a watchdog observer over a vault and feeds a callback.

    The callback receives VaultEvent instances on the observer thread.
    """

    def __init__(self, root: Path | str, callback: Callable[[VaultEvent], object]):
        self.root = Path(root).resolve()
        self.handler = VaultEventHandler(self.root, callback)
        self._observer: Optional[Observer] = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Start watching in a background thread."""
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self.handler, str(self.root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Watching %s", self.root)

    def stop(self) -> None:
        """Stop the observer thread."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None


def _hidden(rel: str) -> bool:
    return any(part.startswith(".") for part in PurePosixPath(rel).parts)


def _tracked(rel: str) -> bool:
    return rel.endswith(MARKDOWN_SUFFIX) and not _hidden(rel)
