"""Settings persistence.

Settings live in a JSON object at ``~/.quicksilver/settings.json``. The store
doubles as the watchable configuration source: callbacks registered with
``watch`` fire whenever a key's value changes through ``set`` or ``save_all``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".quicksilver"
SETTINGS_PATH = CONFIG_DIR / "settings.json"

WatchCallback = Callable[[Any], None]


class SettingsStoreProtocol(Protocol):
    def load_all(self) -> dict: ...

    def save_all(self, settings: dict) -> None: ...

    def get(self, key: str, default: Any = None) -> Any: ...


class SettingsStore:
    """JSON-file settings store with per-key change watchers."""

    _instance: SettingsStore | None = None

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or SETTINGS_PATH
        self._watchers: dict[str, list[WatchCallback]] = {}
        self._cache: dict | None = None

    @classmethod
    def get_instance(cls) -> SettingsStore:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_all(self) -> dict:
        if self._cache is not None:
            return dict(self._cache)
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            payload = {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read settings %s: %s", self.path, exc)
            payload = {}
        if not isinstance(payload, dict):
            logger.warning("Settings file %s must contain a JSON object", self.path)
            payload = {}
        self._cache = payload
        return dict(payload)

    def save_all(self, settings: dict) -> None:
        previous = self.load_all()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(settings, indent=2, sort_keys=True), encoding="utf-8")
        self._cache = dict(settings)
        for key in set(previous) | set(settings):
            if previous.get(key) != settings.get(key):
                self._notify(key, settings.get(key))

    def get(self, key: str, default: Any = None) -> Any:
        return self.load_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        settings = self.load_all()
        settings[key] = value
        self.save_all(settings)

    def watch(self, key: str, callback: WatchCallback) -> Callable[[], None]:
        """Call ``callback(new_value)`` whenever ``key`` changes.

        Returns:
            A function that removes the watcher.
        """
        self._watchers.setdefault(key, []).append(callback)

        def unwatch() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unwatch

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._watchers.get(key, [])):
            try:
                callback(value)
            except Exception as exc:
                logger.warning("Settings watcher for %r failed: %s", key, exc)
