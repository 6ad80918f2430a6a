"""Tests for ksu.plugin -- event routing, suppression, re-entrancy."""

import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

from ksu.board.store import VaultStore
from ksu.board.types import EventKind, VaultEvent
from ksu.plugin import KanbanStatusUpdater
from ksu.settings import Settings

BOARD = "---\nkanban-plugin: basic\n---\n\n## done\n- [[Task A]]\n"


def _make_vault(root: Path, files: dict[str, str]) -> VaultStore:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return VaultStore(root)


def _plugin(tmpdir, files=None, store_cls=VaultStore, **kwargs):
    d = Path(tmpdir)
    _make_vault(d, files if files is not None else {
        "Board.md": BOARD,
        "tasks/Task A.md": "---\nstatus: todo\n---\n",
    })
    plugin = KanbanStatusUpdater(store_cls(d), **kwargs)
    plugin.load()
    return plugin


class TestLoad:
    def test_load_indexes_boards(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            assert plugin.index.is_board("Board.md")
            assert not plugin.index.is_board("tasks/Task A.md")

    def test_debug_mode_logs_index_size(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            with caplog.at_level(logging.INFO, logger="ksu.plugin"):
                _plugin(tmpdir, settings=Settings(debug_mode=True))
            assert "Indexed 1 board(s)" in caplog.text


class TestDispatch:
    def test_modified_board_syncs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            report = plugin.dispatch(VaultEvent(EventKind.MODIFIED, "Board.md"))
            assert report is not None
            assert len(report.changes) == 1
            assert plugin.store.get_metadata("tasks/archive/Task A.md") == {"status": "done"}

    def test_modified_non_board_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            with patch.object(plugin.engine, "sync_board") as sync:
                assert plugin.dispatch(VaultEvent(EventKind.MODIFIED, "tasks/Task A.md")) is None
            sync.assert_not_called()

    def test_modified_ignored_while_syncing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            with plugin.engine.session("Other.md"):
                with patch.object(plugin.engine, "sync_board") as sync:
                    assert plugin.on_modified("Board.md") is None
            sync.assert_not_called()

    def test_created_rebuilds_index(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            (Path(tmpdir) / "Second.md").write_text(BOARD)
            plugin.dispatch(VaultEvent(EventKind.CREATED, "Second.md"))
            assert plugin.index.is_board("Second.md")

    def test_renamed_rebuilds_index(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            (Path(tmpdir) / "Board.md").rename(Path(tmpdir) / "Renamed.md")
            plugin.dispatch(VaultEvent(EventKind.RENAMED, "Renamed.md", "Board.md"))
            assert plugin.index.is_board("Renamed.md")
            assert not plugin.index.is_board("Board.md")

    def test_deleted_forgets_board(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            plugin.dispatch(VaultEvent(EventKind.DELETED, "Board.md"))
            assert not plugin.index.is_board("Board.md")

    def test_modified_new_board_is_picked_up(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir, files={"tasks/Task A.md": ""})
            (Path(tmpdir) / "Late.md").write_text(BOARD)
            report = plugin.dispatch(VaultEvent(EventKind.MODIFIED, "Late.md"))
            assert plugin.index.is_board("Late.md")
            assert report is not None and len(report.changes) == 1

    def test_unreadable_board_logged(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            (Path(tmpdir) / "Board.md").unlink()
            with caplog.at_level(logging.ERROR, logger="ksu.plugin"):
                assert plugin.sync_board("Board.md") is None
            assert "Could not read board Board.md" in caplog.text

    def test_undecodable_board_logged(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            (Path(tmpdir) / "Board.md").write_bytes(b"---\nkanban-plugin: basic\n---\n## d\xe9\n")
            with caplog.at_level(logging.ERROR, logger="ksu.plugin"):
                assert plugin.sync_board("Board.md") is None
                assert plugin.sync_all() == []
            assert "Could not read board Board.md" in caplog.text

    def test_late_echo_after_sync_writes_nothing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir)
            first = plugin.dispatch(VaultEvent(EventKind.MODIFIED, "Board.md"))
            assert len(first.changes) == 1
            assert plugin.engine.is_idle

            with patch.object(plugin.store, "mutate_metadata") as mutate:
                echo = plugin.dispatch(VaultEvent(EventKind.MODIFIED, "Board.md"))
            assert echo.changes == []
            mutate.assert_not_called()


class TestReentrancy:
    def test_writes_during_sync_do_not_retrigger(self):
        plugin_ref = []
        triggered = []

        class EchoingStore(VaultStore):
            """Delivers a board change event synchronously on every write."""

            def mutate_metadata(self, doc_id, fn):
                result = super().mutate_metadata(doc_id, fn)
                triggered.append(plugin_ref[0].on_modified("Board.md"))
                return result

        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir, store_cls=EchoingStore)
            plugin_ref.append(plugin)
            with patch.object(plugin.engine, "sync_board", wraps=plugin.engine.sync_board) as sync:
                report = plugin.on_modified("Board.md")
            assert sync.call_count == 1
            assert triggered == [None]
            assert len(report.changes) == 1
            assert plugin.engine.is_idle


class TestSyncAll:
    def test_sync_all_covers_every_board(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            plugin = _plugin(tmpdir, files={
                "A.md": "---\nkanban-plugin: basic\n---\n## doing\n- [[x]]\n",
                "B.md": "---\nkanban-plugin: basic\n---\n## review\n- [[y]]\n",
                "x.md": "",
                "y.md": "",
            })
            reports = plugin.sync_all()
            assert [r.board for r in reports] == ["A.md", "B.md"]
            assert plugin.store.get_metadata("x.md") == {"status": "doing"}
            assert plugin.store.get_metadata("y.md") == {"status": "review"}
