"""Keymap management utilities for quicksilver."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..core.keys import chord_tokens
from ..core.state import Mode
from ..stores import CONFIG_DIR, SettingsStore, SettingsStoreProtocol
from .actions import ACTIONS, DEFAULT_BINDINGS, Binding

logger = logging.getLogger(__name__)

CUSTOM_KEYMAP_SETTINGS_KEY = "custom_keymap"
CUSTOM_KEYMAP_DIR = CONFIG_DIR / "keymaps"

# Section names used in keymap files
MODE_SECTIONS = {
    "normal": Mode.NORMAL,
    "caret": Mode.VISUAL_CARET,
    "visual": Mode.VISUAL_RANGE,
}


class KeymapError(ValueError):
    """A custom keymap file is unreadable or invalid."""


class KeymapManager:
    """Loads an optional custom keymap and merges it over the defaults.

    A custom binding for an action replaces every default chord of that
    action in the same mode; actions the file does not mention keep their
    default chords.
    """

    def __init__(self, settings_store: SettingsStoreProtocol | None = None) -> None:
        self._settings_store = settings_store or SettingsStore.get_instance()
        self._custom_keymap_name: str | None = None
        self._custom_keymap_path: Path | None = None
        self._bindings: dict[Mode, list[Binding]] = _copy_defaults()

    def initialize(self) -> dict:
        """Initialize keymap from settings.

        Returns:
            The loaded settings dictionary.
        """
        settings = self._settings_store.load_all()
        self.load_custom_keymap(settings)
        return settings

    def load_custom_keymap(self, settings: dict) -> None:
        keymap_name = settings.get(CUSTOM_KEYMAP_SETTINGS_KEY)
        if not keymap_name or not isinstance(keymap_name, str):
            return
        if keymap_name.strip() in ("", "default"):
            return

        try:
            path = self._resolve_keymap_path(keymap_name.strip())
            self._register_custom_keymap(path, keymap_name.strip())
        except KeymapError as exc:
            logger.warning("Failed to load custom keymap '%s': %s", keymap_name, exc)

    @property
    def bindings(self) -> dict[Mode, list[Binding]]:
        """Effective bindings per mode (defaults merged with the custom keymap)."""
        return {mode: list(bindings) for mode, bindings in self._bindings.items()}

    def _resolve_keymap_path(self, keymap_name: str) -> Path:
        if keymap_name.startswith(("~", "/")) or Path(keymap_name).is_absolute():
            return Path(keymap_name).expanduser()

        name = Path(keymap_name).stem
        return CUSTOM_KEYMAP_DIR / f"{name}.json"

    def _register_custom_keymap(self, path: Path, keymap_name: str) -> None:
        """Load, validate and apply a custom keymap from file.

        Raises:
            KeymapError: If the keymap file is missing or invalid.
        """
        path = path.expanduser()
        if not path.exists():
            raise KeymapError(f"Keymap file not found: {path}")

        overrides = self._load_keymap_from_file(path)
        merged = _copy_defaults()
        for mode, custom in overrides.items():
            merged[mode] = merge_bindings(merged[mode], custom)
            check_prefix_conflicts(merged[mode])

        self._bindings = merged
        self._custom_keymap_name = keymap_name
        self._custom_keymap_path = path.resolve()
        logger.debug("Loaded custom keymap %s", path)

    def _load_keymap_from_file(self, path: Path) -> dict[Mode, list[Binding]]:
        """Parse per-mode bindings from a keymap JSON file.

        Raises:
            KeymapError: If the JSON is invalid or missing required fields.
        """
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise KeymapError(f"Failed to read keymap JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise KeymapError("Keymap file must contain a JSON object.")

        keymap_data = payload.get("keymap", payload)
        if not isinstance(keymap_data, dict):
            raise KeymapError('Keymap file "keymap" must be a JSON object.')

        overrides: dict[Mode, list[Binding]] = {}
        for section, items in keymap_data.items():
            mode = MODE_SECTIONS.get(section)
            if mode is None:
                raise KeymapError(f'Unknown keymap section "{section}".')
            if not isinstance(items, list):
                raise KeymapError(f'"{section}" must be a list.')
            overrides[mode] = self._parse_bindings(section, items)
        return overrides

    def _parse_bindings(self, section: str, data: list[Any]) -> list[Binding]:
        bindings = []
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise KeymapError(f'Binding at index {i} of "{section}" must be an object.')

            chord = item.get("chord")
            action = item.get("action")

            if not isinstance(chord, str) or not chord.strip():
                raise KeymapError(f'Binding at index {i} of "{section}" missing required "chord".')
            if not isinstance(action, str) or not action:
                raise KeymapError(f'Binding at index {i} of "{section}" missing required "action".')
            if action not in ACTIONS:
                raise KeymapError(f'Binding at index {i} of "{section}" has unknown action "{action}".')

            bindings.append(Binding(chord=" ".join(chord.split()), action=action))
        return bindings

    def get_custom_keymap_name(self) -> str | None:
        return self._custom_keymap_name

    def get_custom_keymap_path(self) -> Path | None:
        return self._custom_keymap_path

    def reset_to_default(self) -> None:
        """Reset to the default keymap."""
        self._bindings = _copy_defaults()
        self._custom_keymap_name = None
        self._custom_keymap_path = None


def _copy_defaults() -> dict[Mode, list[Binding]]:
    return {mode: list(bindings) for mode, bindings in DEFAULT_BINDINGS.items()}


def merge_bindings(defaults: list[Binding], custom: list[Binding]) -> list[Binding]:
    """Overlay custom bindings on defaults.

    Rebound actions lose their default chords, and a custom chord takes over
    any default binding that used the same chord.
    """
    rebound = {binding.action for binding in custom}
    chords = {binding.chord for binding in custom}
    kept = [
        binding for binding in defaults
        if binding.action not in rebound and binding.chord not in chords
    ]
    return kept + list(custom)


def check_prefix_conflicts(bindings: list[Binding]) -> None:
    """Reject a chord that is also the start of a longer chord; it could never resolve.

    Raises:
        KeymapError: On the first conflicting pair.
    """
    token_lists = [(binding.chord, chord_tokens(binding.chord)) for binding in bindings]
    for chord, tokens in token_lists:
        for other, other_tokens in token_lists:
            if other != chord and other_tokens[: len(tokens)] == tokens:
                raise KeymapError(f'Chord "{chord}" is a prefix of "{other}".')
