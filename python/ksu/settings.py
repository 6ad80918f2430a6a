"""Persisted plugin settings.

Stored as JSON in the vault's plugin data file with the same camelCase
keys the desktop plugin uses, so both read and write one file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PLUGIN_ID = "kanban-status-updater"

# attribute name -> key in data.json
_KEYS = {
    "status_property_name": "statusPropertyName",
    "show_notifications": "showNotifications",
    "debug_mode": "debugMode",
}


@dataclass
class Settings:
    """Runtime settings for the status updater."""

    status_property_name: str = "status"
    show_notifications: bool = False
    debug_mode: bool = False

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Overlay known keys from ``data`` onto the defaults."""
        settings = cls()
        for attr, key in _KEYS.items():
            if key in data:
                setattr(settings, attr, data[key])
        if not isinstance(settings.status_property_name, str) or not settings.status_property_name.strip():
            settings.status_property_name = cls.status_property_name
        settings.show_notifications = bool(settings.show_notifications)
        settings.debug_mode = bool(settings.debug_mode)
        return settings

    @classmethod
    def load(cls, path: Path | str | None) -> "Settings":
        """Load settings from a JSON file, falling back to defaults."""
        if path is None:
            return cls()
        cfg_path = Path(path)
        if not cfg_path.exists():
            return cls()
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read settings from %s (%s); using defaults", cfg_path, exc)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object; using defaults", cfg_path)
            return cls()
        return cls.from_dict(data)

    def save(self, path: Path | str) -> None:
        cfg_path = Path(path)
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        with open(cfg_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")


def default_settings_path(vault: Path | str) -> Path:
    """Plugin data file inside a vault: ``.obsidian/plugins/<id>/data.json``."""
    return Path(vault) / ".obsidian" / "plugins" / PLUGIN_ID / "data.json"
