"""Tests for settings parsing and the JSON settings store."""

from __future__ import annotations

import json

from quicksilver.blocklist import RuleType
from quicksilver.config import (
    DEFAULT_HINT_SELECTOR,
    DEFAULT_SCROLL_STEP,
    Settings,
    load_settings,
)
from quicksilver.core.labels import DEFAULT_ALPHABET
from quicksilver.stores import SettingsStore
from tests.fakes import MockSettingsStore


class TestSettingsFromDict:
    """Tests for Settings.from_dict."""

    def test_defaults(self):
        settings = Settings.from_dict({})
        assert settings.hint_selector == DEFAULT_HINT_SELECTOR
        assert settings.scroll_step == DEFAULT_SCROLL_STEP
        assert settings.hint_alphabet == DEFAULT_ALPHABET
        assert settings.leader_key == " "
        assert settings.single_char_hints is True
        assert settings.disabled_globally is False
        assert len(settings.blocklist) == 0
        assert settings.custom_keymap is None

    def test_stored_values(self):
        settings = Settings.from_dict({
            "hint_selector": "a,button",
            "scroll_step": 120,
            "hint_alphabet": "asdfjkl",
            "leader_key": ",",
            "single_char_hints": False,
            "disabled_globally": True,
            "custom_keymap": "mine",
            "blocklist": [{"type": "domain", "value": "example.com"}],
        })
        assert settings.hint_selector == "a,button"
        assert settings.scroll_step == 120
        assert settings.hint_alphabet == "asdfjkl"
        assert settings.leader_key == ","
        assert settings.single_char_hints is False
        assert settings.disabled_globally is True
        assert settings.custom_keymap == "mine"
        assert settings.blocklist.rules[0].type is RuleType.DOMAIN

    def test_invalid_values_keep_defaults(self, caplog):
        settings = Settings.from_dict({
            "hint_selector": "",
            "scroll_step": True,
            "hint_alphabet": 7,
            "disabled_globally": "yes",
        })
        assert settings.hint_selector == DEFAULT_HINT_SELECTOR
        assert settings.scroll_step == DEFAULT_SCROLL_STEP
        assert settings.hint_alphabet == DEFAULT_ALPHABET
        assert settings.disabled_globally is False
        assert "Ignoring invalid setting scroll_step" in caplog.text

    def test_negative_scroll_step(self):
        assert Settings.from_dict({"scroll_step": -5}).scroll_step == DEFAULT_SCROLL_STEP

    def test_bad_blocklist_ignored(self, caplog):
        settings = Settings.from_dict({"blocklist": [{"type": "nope", "value": "x"}]})
        assert len(settings.blocklist) == 0
        assert "Ignoring stored blocklist" in caplog.text

    def test_to_dict_round_trip(self):
        settings = Settings(hint_alphabet="abc", scroll_step=30)
        settings.blocklist.add(RuleType.PREFIX, "https://example.com/")
        assert Settings.from_dict(settings.to_dict()).to_dict() == settings.to_dict()

    def test_load_settings(self):
        store = MockSettingsStore({"scroll_step": 40})
        assert load_settings(store).scroll_step == 40


class TestSettingsStore:
    """Tests for the JSON file store."""

    def test_missing_file(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        assert store.load_all() == {}
        assert store.get("scroll_step", 70) == 70

    def test_set_persists(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        SettingsStore(path).set("hint_alphabet", "abc")

        assert json.loads(path.read_text(encoding="utf-8")) == {"hint_alphabet": "abc"}
        assert SettingsStore(path).get("hint_alphabet") == "abc"

    def test_invalid_json(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert SettingsStore(path).load_all() == {}
        assert "Failed to read settings" in caplog.text

    def test_non_object(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert SettingsStore(path).load_all() == {}
        assert "must contain a JSON object" in caplog.text

    def test_load_all_returns_a_copy(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        store.load_all()["hint_alphabet"] = "xyz"
        assert store.get("hint_alphabet") is None

    def test_watch_fires_on_change_only(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        seen = []
        unwatch = store.watch("hint_selector", seen.append)

        store.set("hint_selector", "a")
        store.set("hint_selector", "a")
        store.set("scroll_step", 10)
        store.save_all({"scroll_step": 10})
        assert seen == ["a", None]

        unwatch()
        store.set("hint_selector", "button")
        assert seen == ["a", None]

    def test_failing_watcher_is_logged(self, tmp_path, caplog):
        store = SettingsStore(tmp_path / "settings.json")
        seen = []

        def broken(value):
            raise RuntimeError("boom")

        store.watch("hint_selector", broken)
        store.watch("hint_selector", seen.append)
        store.set("hint_selector", "a")
        assert seen == ["a"]
        assert "Settings watcher" in caplog.text
