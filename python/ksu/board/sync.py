"""SyncEngine -- projects a board's columns onto its items' frontmatter.

The board text is the only source of truth for which column a card is
in. Each sync parses the board, resolves every card's target state, writes
the frontmatter of items that disagree, and relocates items whose archival
state changed. Items are processed one at a time in board order; a failure
on one item is logged and recorded without stopping the rest.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager, nullcontext
from posixpath import basename, splitext

from .parser import parse_board
from .placement import PlacementResolver
from .policy import ColumnPolicy
from .types import ItemChange, SyncReport, SyncState, TargetState

logger = logging.getLogger(__name__)

DEFAULT_STATUS_PROPERTY = "status"
URGENT_KEY = "urgent"
IMPORTANT_KEY = "important"
NOTICE_DURATION_MS = 3000


class SyncEngine:
    """Reconciles item metadata with board columns.

    While a sync runs the engine is in ``SyncState.SYNCING``; hosts that
    deliver change events synchronously use this to drop the ones caused
    by the engine's own writes.
    """

    def __init__(
        self,
        store,
        settings=None,
        policy: ColumnPolicy | None = None,
        placement: PlacementResolver | None = None,
        notifier=None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.policy = policy if policy is not None else ColumnPolicy.default_policy()
        self.placement = placement if placement is not None else PlacementResolver(store)
        self.notifier = notifier
        self.state = SyncState.IDLE
        self.active_board: str | None = None

    @property
    def is_idle(self) -> bool:
        return self.state is SyncState.IDLE

    @property
    def status_property(self) -> str:
        name = getattr(self.settings, "status_property_name", None)
        return name.strip() if name and name.strip() else DEFAULT_STATUS_PROPERTY

    # --- Public API ---

    def sync_board(self, board_id: str) -> SyncReport:
        """Bring every item linked from ``board_id`` in line with its column."""
        report = SyncReport(board=board_id)
        content = self.store.read_text(board_id)
        cards = parse_board(content)
        if not cards:
            return report

        with self.session(board_id), self._listing():
            for card in cards:
                self._sync_card(card.target, self.policy.resolve(card.column), report)

        return report

    @contextmanager
    def session(self, board_id: str):
        """Hold the engine in SYNCING for the duration of a board pass."""
        if not self.is_idle:
            raise RuntimeError(
                f"sync of {board_id} requested while {self.active_board} is syncing"
            )
        self.state = SyncState.SYNCING
        self.active_board = board_id
        try:
            yield
        finally:
            self.state = SyncState.IDLE
            self.active_board = None

    # --- Internal ---

    def _listing(self):
        listing = getattr(self.store, "listing", None)
        return listing() if listing is not None else nullcontext()

    def _sync_card(self, target: str, state: TargetState, report: SyncReport) -> None:
        try:
            item = self.store.resolve_link_target(target)
            if item is None:
                report.unresolved.append(target)
                return
            change = self._apply(item, state)
            if change is None:
                report.skipped.append(item)
                return
            report.changes.append(change)
            change.moved_to = self._place(item, state.status)
        except Exception as exc:
            logger.exception("Error updating %s", target)
            report.errors.append((target, str(exc)))

    def _apply(self, item: str, state: TargetState) -> ItemChange | None:
        """Write ``state`` into the item's frontmatter if it differs."""
        prop = self.status_property
        current = self.store.get_metadata(item) or {}
        old_status = current.get(prop)

        if not needs_update(current, state, prop):
            return None

        def _update(fm: dict) -> None:
            fm[prop] = state.status
            if state.is_quadrant:
                fm[URGENT_KEY] = state.urgent
                fm[IMPORTANT_KEY] = state.important

        self.store.mutate_metadata(item, _update)

        name = _display_name(item)
        self._log(f'{name}: "{old_status}" → "{state.status}"')
        self._notice(f'{name}: "{old_status or "(none)"}" → "{state.status}"')
        return ItemChange(
            path=item,
            old_status=old_status,
            new_status=state.status,
            urgent=state.urgent,
            important=state.important,
        )

    def _place(self, item: str, status: str) -> str | None:
        moved_to = self.placement.resolve(item, status)
        if moved_to is None:
            return None
        name = _display_name(item)
        folder = moved_to.rsplit("/", 1)[0]
        if self.placement.is_archival(status):
            self._log(f"Archived: {name} → {folder}/")
            self._notice(f"Archived: {name}")
        else:
            self._log(f"Unarchived: {name} → {folder}/")
            self._notice(f"Unarchived: {name}")
        return moved_to

    def _log(self, message: str) -> None:
        if getattr(self.settings, "debug_mode", False):
            logger.info(message)
        else:
            logger.debug(message)

    def _notice(self, message: str) -> None:
        if self.notifier is None or not getattr(self.settings, "show_notifications", False):
            return
        try:
            self.notifier.notify(message, NOTICE_DURATION_MS)
        except Exception:
            logger.debug("Notifier failed for %r", message, exc_info=True)


def needs_update(metadata: dict, state: TargetState, status_property: str) -> bool:
    """True if ``metadata`` disagrees with ``state``.

    Flags are compared only for quadrant targets; a missing flag never
    equals a required True/False.
    """
    if metadata.get(status_property) != state.status:
        return True
    if state.is_quadrant:
        if not _same_flag(metadata.get(URGENT_KEY), state.urgent):
            return True
        if not _same_flag(metadata.get(IMPORTANT_KEY), state.important):
            return True
    return False


def _same_flag(current, wanted: bool | None) -> bool:
    return isinstance(current, bool) and current is wanted


def _display_name(path: str) -> str:
    return splitext(basename(path))[0]
