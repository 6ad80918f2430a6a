"""Filesystem document store over an Obsidian-style vault.

Documents are identified by their vault-relative POSIX path
(``projects/tasks/Task A.md``). Metadata lives in YAML frontmatter and is
rewritten atomically, leaving the body untouched.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Callable

from .errors import FrontmatterError, VaultPathError
from .frontmatter import load_for_update, parse_frontmatter, render_document

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


class VaultStore:
    """Document store backed by a directory of markdown files."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()
        self._snapshot: list[str] | None = None

    # --- Queries ---

    def list_all_documents(self) -> list[str]:
        """All markdown documents in the vault, sorted by path.

        Dot-directories (``.obsidian``, ``.trash``, ...) are skipped. Inside
        a ``listing()`` block the walk is done once and reused.
        """
        if self._snapshot is not None:
            return list(self._snapshot)
        results: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in filenames:
                if name.startswith(".") or not name.endswith(MARKDOWN_SUFFIX):
                    continue
                results.append(self._relative(Path(dirpath) / name))
        return sorted(results)

    def exists(self, path: str) -> bool:
        return self._absolute(path).exists()

    def read_text(self, doc_id: str) -> str:
        """Document text with its original line endings."""
        with open(self._absolute(doc_id), "r", encoding="utf-8", newline="") as fh:
            return fh.read()

    def get_metadata(self, doc_id: str) -> dict | None:
        """Frontmatter of a document, or None if it has none (or it is unreadable)."""
        try:
            content = self.read_text(doc_id)
        except (OSError, UnicodeDecodeError):
            return None
        return parse_frontmatter(content)

    def resolve_link_target(self, text: str) -> str | None:
        """Resolve a ``[[wikilink]]`` target to a document path.

        ``|alias`` and ``#heading`` suffixes are ignored and the ``.md``
        extension is optional. Targets with a folder part match by path
        (exact or as a suffix), bare names match by basename. The
        shallowest match wins.
        """
        linkpath = _linkpath(text)
        if not linkpath:
            return None
        if not linkpath.endswith(MARKDOWN_SUFFIX):
            linkpath += MARKDOWN_SUFFIX
        linkpath = linkpath.lstrip("/")

        candidates: list[str] = []
        for doc_id in self.list_all_documents():
            if doc_id == linkpath:
                return doc_id
            if "/" in linkpath:
                if doc_id.endswith("/" + linkpath):
                    candidates.append(doc_id)
            elif PurePosixPath(doc_id).name == linkpath:
                candidates.append(doc_id)

        if not candidates:
            return None
        candidates.sort(key=lambda p: (p.count("/"), p))
        return candidates[0]

    @contextmanager
    def listing(self):
        """Walk the vault once and serve document lookups from that list.

        Moves made through this store keep the list current.
        """
        if self._snapshot is not None:
            yield
            return
        self._snapshot = self.list_all_documents()
        try:
            yield
        finally:
            self._snapshot = None

    # --- Mutations ---

    def mutate_metadata(self, doc_id: str, fn: Callable[[dict], None]) -> dict:
        """Apply ``fn`` to a document's frontmatter and persist it atomically.

        Returns the updated metadata. Raises FrontmatterError if the existing
        frontmatter cannot be parsed as a mapping.
        """
        path = self._absolute(doc_id)
        content = self.read_text(doc_id)
        loaded = load_for_update(content)
        if loaded is None:
            raise FrontmatterError(doc_id, "frontmatter is not a valid YAML mapping")
        metadata, body = loaded
        fn(metadata)
        _atomic_write(path, render_document(metadata, body, _newline(content)))
        return metadata

    def move(self, doc_id: str, new_id: str) -> None:
        """Rename a document within the vault.

        Raises FileExistsError if ``new_id`` is taken.
        """
        src = self._absolute(doc_id)
        dest = self._absolute(new_id)
        if not src.exists():
            raise FileNotFoundError(f"{doc_id} does not exist")
        if dest.exists():
            raise FileExistsError(f"{new_id} already exists")
        dest.parent.mkdir(parents=True, exist_ok=True)
        src.rename(dest)
        if self._snapshot is not None:
            if doc_id in self._snapshot:
                self._snapshot.remove(doc_id)
            self._snapshot.append(new_id)
            self._snapshot.sort()
        logger.debug("Moved %s -> %s", doc_id, new_id)

    def create_folder(self, path: str) -> None:
        self._absolute(path).mkdir(parents=True)

    # --- Internal ---

    def _absolute(self, rel: str) -> Path:
        candidate = (self.root / rel).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            raise VaultPathError(f"{rel!r} is outside the vault {self.root}")
        return candidate

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()


def _linkpath(text: str) -> str:
    """Strip alias and subpath parts from a wikilink target."""
    target = text.split("|", 1)[0]
    target = target.split("#", 1)[0]
    return target.strip()


def _newline(content: str) -> str:
    """Line ending used by the first line of ``content``."""
    first = content.find("\n")
    if first > 0 and content[first - 1] == "\r":
        return "\r\n"
    return "\n"


def _atomic_write(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        if path.exists():
            os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
