"""Command line entry point: ``ksu`` / ``python -m ksu``.

Usage:
    ksu index ~/vault                      # list kanban boards
    ksu sync ~/vault                       # sync every board once
    ksu sync ~/vault Boards/Work.md --json # sync one board, JSON report
    ksu watch ~/vault                      # keep items in sync until Ctrl+C
    ksu config ~/vault --status-property state --notifications
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .board.parser import columns
from .board.store import VaultStore
from .notice import PrintNotifier
from .plugin import KanbanStatusUpdater
from .settings import Settings, default_settings_path
from .watch import VaultWatcher

EXIT_OK = 0
EXIT_ITEM_ERRORS = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ksu",
        description="Keep kanban board columns and task frontmatter in sync.",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    ap.add_argument(
        "--settings", default=None,
        help="Settings JSON (default: <vault>/.obsidian/plugins/kanban-status-updater/data.json)",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    p_index = sub.add_parser("index", help="List kanban boards in the vault")
    p_index.add_argument("vault", help="Vault root directory")

    p_sync = sub.add_parser("sync", help="Sync boards once")
    p_sync.add_argument("vault", help="Vault root directory")
    p_sync.add_argument("boards", nargs="*", help="Vault-relative board paths (default: all)")
    p_sync.add_argument("--json", action="store_true", help="Print JSON reports")

    p_watch = sub.add_parser("watch", help="Watch the vault and sync on board edits")
    p_watch.add_argument("vault", help="Vault root directory")

    p_config = sub.add_parser("config", help="Show or update settings")
    p_config.add_argument("vault", help="Vault root directory")
    p_config.add_argument("--status-property", default=None, help="Frontmatter key for the status")
    p_config.add_argument(
        "--notifications", dest="notifications", action="store_true", default=None,
        help="Show a notice when a status is updated",
    )
    p_config.add_argument("--no-notifications", dest="notifications", action="store_false")
    p_config.add_argument(
        "--debug", dest="debug", action="store_true", default=None,
        help="Log activity at INFO level",
    )
    p_config.add_argument("--no-debug", dest="debug", action="store_false")

    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [ksu] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    vault = Path(args.vault).expanduser()
    if not vault.is_dir():
        print(f"Not a directory: {vault}", file=sys.stderr)
        return EXIT_USAGE

    settings_path = Path(args.settings) if args.settings else default_settings_path(vault)
    settings = Settings.load(settings_path)

    if args.command == "config":
        return _cmd_config(args, settings, settings_path)

    store = VaultStore(vault)
    plugin = KanbanStatusUpdater(store, settings=settings, notifier=PrintNotifier())
    plugin.load()

    if args.command == "index":
        return _cmd_index(plugin)
    if args.command == "sync":
        return _cmd_sync(args, plugin)
    if args.command == "watch":
        return _cmd_watch(plugin, vault)
    return EXIT_USAGE


def _cmd_index(plugin: KanbanStatusUpdater) -> int:
    for path in plugin.index:
        try:
            names = columns(plugin.store.read_text(path))
        except (OSError, UnicodeDecodeError) as exc:
            print(f"{path}\tunreadable: {exc}", file=sys.stderr)
            continue
        print(f"{path}\t{len(names)} column(s): {', '.join(names)}")
    return EXIT_OK


def _cmd_sync(args, plugin: KanbanStatusUpdater) -> int:
    if args.boards:
        missing = [b for b in args.boards if not plugin.index.is_board(b)]
        if missing:
            for b in missing:
                print(f"Not a kanban board: {b}", file=sys.stderr)
            return EXIT_USAGE
        reports = [plugin.sync_board(b) for b in args.boards]
        reports = [r for r in reports if r is not None]
    else:
        reports = plugin.sync_all()

    for report in reports:
        if args.json:
            print(report.to_json())
            continue
        print(
            f"{report.board}: {len(report.changes)} updated, "
            f"{len(report.skipped)} unchanged, {len(report.unresolved)} unresolved, "
            f"{len(report.errors)} failed"
        )
        for change in report.changes:
            line = f"  {change.path}: {change.old_status!r} -> {change.new_status!r}"
            if change.moved_to:
                line += f" (moved to {change.moved_to})"
            print(line)
        for target, message in report.errors:
            print(f"  ! {target}: {message}")

    return EXIT_OK if all(r.ok for r in reports) else EXIT_ITEM_ERRORS


def _cmd_watch(plugin: KanbanStatusUpdater, vault: Path) -> int:
    watcher = VaultWatcher(vault, plugin.dispatch)
    watcher.start()
    print(f"ksu watching {vault} ({len(plugin.index)} board(s)). Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        watcher.stop()
    return EXIT_OK


def _cmd_config(args, settings: Settings, settings_path: Path) -> int:
    changed = False
    if args.status_property is not None:
        settings.status_property_name = args.status_property.strip() or "status"
        changed = True
    if args.notifications is not None:
        settings.show_notifications = args.notifications
        changed = True
    if args.debug is not None:
        settings.debug_mode = args.debug
        changed = True
    if changed:
        settings.save(settings_path)
    for key, value in settings.to_dict().items():
        print(f"{key}: {value}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
