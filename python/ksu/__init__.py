"""ksu -- Kanban Status Updater.

Keeps the frontmatter of task notes consistent with the kanban board
columns their cards sit in, and files done tasks under ``tasks/archive``.
"""

from pathlib import Path

from .board import BoardIndex, ColumnPolicy, SyncEngine, SyncReport, VaultStore, parse_board
from .notice import LogNotifier, PrintNotifier
from .plugin import KanbanStatusUpdater
from .settings import Settings, default_settings_path

__version__ = "0.1.0"


def open_vault(root, settings: Settings = None, notifier=None) -> KanbanStatusUpdater:
    """Create an updater for a vault directory and index its boards.

    Settings default to the vault's plugin data file.
    """
    if settings is None:
        settings = Settings.load(default_settings_path(root))
    plugin = KanbanStatusUpdater(VaultStore(Path(root)), settings=settings, notifier=notifier)
    plugin.load()
    return plugin


__all__ = [
    'KanbanStatusUpdater', 'Settings', 'default_settings_path',
    'VaultStore', 'BoardIndex', 'ColumnPolicy', 'SyncEngine', 'SyncReport',
    'parse_board', 'PrintNotifier', 'LogNotifier',
    'open_vault',
]
