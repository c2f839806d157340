"""
Configuration storage for Pureview.

A flat JSON object on disk holding string values:
- auth: base64 credential sent with every GitHub request
- aliases: JSON-encoded mapping of alias name to usernames
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PUREVIEW_CONFIG"
DEFAULT_CONFIG_FILENAME = ".pure-config"

AUTH_KEY = "auth"
ALIASES_KEY = "aliases"


class ConfigReadError(Exception):
    """The config file exists but could not be read."""
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Could not read config file {path}: {reason}")
        self.path = path


def get_config_path() -> Path:
    """Get the config file location, honoring PUREVIEW_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CONFIG_FILENAME


class ConfigStore:
    """File-backed key-value store. Every mutation is written immediately."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else get_config_path()
        self._data: dict[str, Any] = {}

        if self.path.exists():
            try:
                self._data = self._read()
            except ConfigReadError as e:
                # Keep going with an empty store for this session
                logger.error("%s", e)
                self._data = {}
        else:
            self._write()

    def _read(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigReadError(self.path, str(e)) from e

        if not text.strip():
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigReadError(self.path, str(e)) from e

        if not isinstance(data, dict):
            raise ConfigReadError(self.path, "expected a JSON object")
        return data

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")
        logger.debug("Wrote %d config key(s) to %s", len(self._data), self.path)

    def get(self, key: str | None = None) -> Any:
        """Get one value (None if absent), or a copy of everything when key is omitted."""
        if key is None:
            return dict(self._data)
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._write()

    def delete(self, key: str | None = None) -> None:
        """Delete one key, or clear the store when key is omitted."""
        if key is None:
            self._data = {}
        else:
            self._data.pop(key, None)
        self._write()

    def has_key(self, key: str) -> bool:
        return key in self._data

    def __contains__(self, key: object) -> bool:
        return key in self._data
