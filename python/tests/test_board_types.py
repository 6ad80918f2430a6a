"""Tests for ksu.board.types -- TargetState, SyncReport serialization."""

import json

from ksu.board.types import (
    EventKind,
    ItemChange,
    SyncReport,
    SyncState,
    TargetState,
    VaultEvent,
)


def test_target_state_quadrant_flag():
    assert TargetState("backlog", True, False).is_quadrant
    assert not TargetState("done").is_quadrant


def test_sync_report_json_keys():
    report = SyncReport(board="Board.md")
    d = report.to_dict()
    assert set(d.keys()) == {"board", "changes", "skipped", "unresolved", "errors"}
    assert d["changes"] == []
    assert report.ok


def test_sync_report_to_json():
    report = SyncReport(
        board="Board.md",
        changes=[ItemChange("tasks/a.md", None, "done", moved_to="tasks/archive/a.md")],
        unresolved=["Ghost"],
        errors=[("Broken", "bad yaml")],
    )
    back = json.loads(report.to_json())
    assert back["changes"][0] == {
        "path": "tasks/a.md",
        "old_status": None,
        "new_status": "done",
        "urgent": None,
        "important": None,
        "moved_to": "tasks/archive/a.md",
    }
    assert back["errors"] == [{"target": "Broken", "message": "bad yaml"}]
    assert not report.ok


def test_enum_values():
    assert SyncState.IDLE.value == "idle"
    assert SyncState.SYNCING.value == "syncing"
    assert {k.value for k in EventKind} == {"created", "modified", "renamed", "deleted"}


def test_vault_event_defaults():
    event = VaultEvent(EventKind.MODIFIED, "Board.md")
    assert event.old_path is None
