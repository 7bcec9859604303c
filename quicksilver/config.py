"""Configuration for quicksilver.

Holds the Settings domain type and the defaults the engine falls back to
when nothing is stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .blocklist import Blocklist
from .core.keys import DEFAULT_LEADER_KEY
from .core.labels import DEFAULT_ALPHABET
from .stores import CONFIG_DIR, SETTINGS_PATH, SettingsStoreProtocol

logger = logging.getLogger(__name__)

# Standard interactive roles; the default hint target set.
DEFAULT_HINT_SELECTOR = ",".join([
    "a",
    "button",
    "input",
    "textarea",
    "select",
    "summary",
    "details",
    "label",
    "[contenteditable]",
    '[role="button"]',
    '[role="link"]',
    '[role="checkbox"]',
    '[role="radio"]',
    '[role="tab"]',
    '[role="menuitem"]',
    '[role="option"]',
    '[role="switch"]',
    "[onclick]",
])
DEFAULT_INPUT_SELECTOR = "input,textarea,select,[contenteditable]"
DEFAULT_LINK_SELECTOR = "a"
DEFAULT_SCROLL_STEP = 70

HINT_SELECTOR_KEY = "hint_selector"

__all__ = [
    "CONFIG_DIR",
    "DEFAULT_HINT_SELECTOR",
    "DEFAULT_INPUT_SELECTOR",
    "DEFAULT_LINK_SELECTOR",
    "DEFAULT_SCROLL_STEP",
    "HINT_SELECTOR_KEY",
    "SETTINGS_PATH",
    "Settings",
    "load_settings",
]


@dataclass
class Settings:
    """User-tunable behaviour of the engine."""

    hint_selector: str = DEFAULT_HINT_SELECTOR
    input_selector: str = DEFAULT_INPUT_SELECTOR
    link_selector: str = DEFAULT_LINK_SELECTOR
    leader_key: str = DEFAULT_LEADER_KEY
    scroll_step: int = DEFAULT_SCROLL_STEP
    hint_alphabet: str = DEFAULT_ALPHABET
    single_char_hints: bool = True
    disabled_globally: bool = False
    blocklist: Blocklist = field(default_factory=Blocklist)
    custom_keymap: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Build settings from stored data, keeping defaults for bad values."""
        settings = cls()
        for name, expected in (
            ("hint_selector", str),
            ("input_selector", str),
            ("link_selector", str),
            ("leader_key", str),
            ("hint_alphabet", str),
            ("custom_keymap", str),
        ):
            value = data.get(name)
            if value is None:
                continue
            if isinstance(value, expected) and value:
                setattr(settings, name, value)
            else:
                logger.warning("Ignoring invalid setting %s=%r", name, value)

        step = data.get("scroll_step")
        if isinstance(step, int) and not isinstance(step, bool) and step > 0:
            settings.scroll_step = step
        elif step is not None:
            logger.warning("Ignoring invalid setting scroll_step=%r", step)

        for name in ("single_char_hints", "disabled_globally"):
            value = data.get(name)
            if isinstance(value, bool):
                setattr(settings, name, value)
            elif value is not None:
                logger.warning("Ignoring invalid setting %s=%r", name, value)

        rules = data.get("blocklist")
        if rules is not None:
            try:
                settings.blocklist = Blocklist.from_list(rules if isinstance(rules, list) else [rules])
            except ValueError as exc:
                logger.warning("Ignoring stored blocklist: %s", exc)
        return settings

    def to_dict(self) -> dict[str, Any]:
        return {
            "hint_selector": self.hint_selector,
            "input_selector": self.input_selector,
            "link_selector": self.link_selector,
            "leader_key": self.leader_key,
            "scroll_step": self.scroll_step,
            "hint_alphabet": self.hint_alphabet,
            "single_char_hints": self.single_char_hints,
            "disabled_globally": self.disabled_globally,
            "blocklist": self.blocklist.to_list(),
            "custom_keymap": self.custom_keymap,
        }


def load_settings(store: SettingsStoreProtocol) -> Settings:
    return Settings.from_dict(store.load_all())
