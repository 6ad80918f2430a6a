"""Exception types raised by the board-sync core."""

from __future__ import annotations


class KsuError(Exception):
    """Base class for board-sync errors."""


class FrontmatterError(KsuError):
    """A document's frontmatter could not be parsed for rewriting."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class VaultPathError(KsuError, ValueError):
    """A document path resolves outside the vault root."""
