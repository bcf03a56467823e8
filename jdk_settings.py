"""
jdk_settings.py
===============
JSON-backed settings consulted on every discovery pass.

File layout (``jdk_settings.json``)::

    {
      "jdks": {
        "excluded_scan_paths": [],
        "additional_scan_paths": [],
        "additional_jdks": [],
        "version_detection_timeout_ms": 5000
      }
    }

Relative path entries are resolved against the directory that holds the
settings file, so a checked-in settings file behaves the same whatever the
working directory is.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from jdk_dedup import normalize_paths

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "jdk_settings.json"

DEFAULTS: Dict[str, Any] = {
    "jdks": {
        "excluded_scan_paths": [],
        "additional_scan_paths": [],
        "additional_jdks": [],
        "version_detection_timeout_ms": 5000,
    },
}


class Settings:
    """
    Discovery settings stored as JSON.

    Args:
        settings_path:  Path to the JSON file. ``None`` keeps everything in
                        memory (nothing is saved).
    """

    def __init__(self, settings_path: Optional[str | Path] = DEFAULT_SETTINGS_FILE) -> None:
        self.settings_path = Path(settings_path) if settings_path is not None else None
        self.data: Dict[str, Any] = copy.deepcopy(DEFAULTS)
        self._load()

    # ================================================================
    #  PERSISTENCE
    # ================================================================

    def _load(self) -> None:
        if self.settings_path is None:
            return
        if not self.settings_path.exists():
            logger.info("Settings file not found, using defaults")
            return
        try:
            with open(self.settings_path, "r", encoding="utf-8") as fh:
                loaded = json.load(fh)
            if not isinstance(loaded, dict):
                raise ValueError("settings root must be an object")
            self.data.setdefault("jdks", {}).update(loaded.get("jdks", {}))
            for key, value in loaded.items():
                if key != "jdks":
                    self.data[key] = value
            logger.debug("Settings loaded from %s", self.settings_path)
        except (OSError, ValueError) as exc:
            logger.error("Failed to load settings: %s", exc)

    def save(self) -> None:
        """Persist the settings back to disk."""
        if self.settings_path is None:
            return
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as fh:
                json.dump(self.data, fh, indent=2)
            logger.debug("Settings saved to %s", self.settings_path)
        except OSError as exc:
            logger.error("Failed to save settings: %s", exc)

    # ================================================================
    #  GENERIC ACCESS
    # ================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Read a value using dot-notation, e.g. ``"jdks.additional_jdks"``."""
        target: Any = self.data
        for part in key.split("."):
            if not isinstance(target, dict) or part not in target:
                return default
            target = target[part]
        return target

    def update(self, key: str, value: Any) -> None:
        """Set a value using dot-notation and save."""
        parts = key.split(".")
        target = self.data
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value
        self.save()
        logger.info("Setting updated: %s = %s", key, value)

    # ================================================================
    #  DISCOVERY INPUTS
    # ================================================================

    @property
    def base_dir(self) -> Path:
        if self.settings_path is None:
            return Path.cwd()
        return self.settings_path.absolute().parent

    def _paths(self, key: str) -> List[Path]:
        raw = self.get(f"jdks.{key}", []) or []
        if isinstance(raw, str):
            raw = [raw]
        resolved = []
        for entry in raw:
            if entry is None or not str(entry).strip():
                continue
            path = Path(str(entry).strip()).expanduser()
            resolved.append(path if path.is_absolute() else self.base_dir / path)
        return normalize_paths(resolved)

    def excluded_scan_paths(self) -> List[Path]:
        return self._paths("excluded_scan_paths")

    def additional_scan_paths(self) -> List[Path]:
        return self._paths("additional_scan_paths")

    def additional_jdks(self) -> List[Path]:
        return self._paths("additional_jdks")

    @property
    def probe_timeout(self) -> float:
        """``java -version`` timeout in seconds."""
        try:
            millis = int(self.get("jdks.version_detection_timeout_ms", 5000))
        except (TypeError, ValueError):
            millis = 5000
        return max(millis, 1) / 1000.0

    def _append(self, key: str, path: str | Path) -> None:
        entries = list(self.get(f"jdks.{key}", []) or [])
        value = str(path)
        if value not in entries:
            entries.append(value)
            self.update(f"jdks.{key}", entries)

    def add_excluded_path(self, path: str | Path) -> None:
        self._append("excluded_scan_paths", path)

    def add_scan_path(self, path: str | Path) -> None:
        self._append("additional_scan_paths", path)

    def add_additional_jdk(self, path: str | Path) -> None:
        self._append("additional_jdks", path)
