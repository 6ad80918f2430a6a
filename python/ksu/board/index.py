"""BoardIndex -- the set of documents known to be kanban boards."""

from __future__ import annotations

from .frontmatter import BOARD_MARKER, is_board


class BoardIndex:
    """Tracks which documents in a store carry the board marker.

    ``register`` rebuilds the whole set from a full scan; there is no
    incremental diffing.
    """

    def __init__(self, store, marker: str = BOARD_MARKER) -> None:
        self.store = store
        self.marker = marker
        self.boards: set[str] = set()

    def register(self) -> int:
        """Rescan every document and rebuild the index. Returns the board count."""
        found: set[str] = set()
        for doc_id in self.store.list_all_documents():
            if is_board(self.store.get_metadata(doc_id), self.marker):
                found.add(doc_id)
        self.boards = found
        return len(found)

    def refresh(self, doc_id: str) -> bool:
        """Re-check a single document and update its membership.

        Returns True if the document is a board after the check.
        """
        if is_board(self.store.get_metadata(doc_id), self.marker):
            self.boards.add(doc_id)
            return True
        self.boards.discard(doc_id)
        return False

    def forget(self, doc_id: str) -> None:
        self.boards.discard(doc_id)

    def is_board(self, doc_id: str) -> bool:
        return doc_id in self.boards

    def __len__(self) -> int:
        return len(self.boards)

    def __iter__(self):
        return iter(sorted(self.boards))
