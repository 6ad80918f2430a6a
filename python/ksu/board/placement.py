"""Placement -- keeps archived items under ``tasks/archive``.

An item whose status is archival moves from a ``tasks`` folder into its
``archive`` subfolder; an item taken out of an archival status moves back
up. Items outside any ``tasks`` folder are never moved.
"""

from __future__ import annotations

import logging
from posixpath import basename, dirname

logger = logging.getLogger(__name__)

ARCHIVE_STATUSES = frozenset({"done", "archive"})
ACTIVE_FOLDER = "tasks"
ARCHIVE_FOLDER = "archive"


def is_active_folder(folder: str, active: str = ACTIVE_FOLDER) -> bool:
    return folder == active or folder.endswith("/" + active)


def is_archive_folder(
    folder: str,
    active: str = ACTIVE_FOLDER,
    archive: str = ARCHIVE_FOLDER,
) -> bool:
    if not folder.endswith("/" + archive):
        return False
    return is_active_folder(dirname(folder), active)


def placement_for(
    path: str,
    status: str,
    archive_statuses=ARCHIVE_STATUSES,
    active: str = ACTIVE_FOLDER,
    archive: str = ARCHIVE_FOLDER,
) -> str | None:
    """Where an item at ``path`` belongs given ``status``.

    Returns the new path, or None when the item should stay put.
    """
    folder = dirname(path)
    name = basename(path)
    if status in archive_statuses:
        if is_active_folder(folder, active):
            return f"{folder}/{archive}/{name}"
        return None
    if is_archive_folder(folder, active, archive):
        return f"{dirname(folder)}/{name}"
    return None


class PlacementResolver:
    """Moves item documents between the active and archive folders."""

    def __init__(
        self,
        store,
        archive_statuses=ARCHIVE_STATUSES,
        active_folder: str = ACTIVE_FOLDER,
        archive_folder: str = ARCHIVE_FOLDER,
    ) -> None:
        self.store = store
        self.archive_statuses = frozenset(archive_statuses)
        self.active_folder = active_folder
        self.archive_folder = archive_folder

    def is_archival(self, status) -> bool:
        return status in self.archive_statuses

    def resolve(self, item: str, new_status: str) -> str | None:
        """Relocate ``item`` if its archival state changed.

        Returns the new path, or None if nothing moved. Move errors
        propagate to the caller.
        """
        target = placement_for(
            item,
            new_status,
            self.archive_statuses,
            self.active_folder,
            self.archive_folder,
        )
        if target is None:
            return None

        if self.is_archival(new_status):
            archive_dir = dirname(target)
            if not self.store.exists(archive_dir):
                self.store.create_folder(archive_dir)

        self.store.move(item, target)
        logger.debug("Placed %s -> %s", item, target)
        return target
