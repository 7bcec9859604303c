"""Tests for the KeymapManager."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from quicksilver.core.state import Mode
from quicksilver.engine import keymap as keymap_module
from quicksilver.engine.actions import DEFAULT_BINDINGS, Binding
from quicksilver.engine.keymap import (
    KeymapError,
    KeymapManager,
    check_prefix_conflicts,
    merge_bindings,
)
from quicksilver.engine.machine import ModeStateMachine
from quicksilver.host.memory import MemoryDocument
from tests.fakes import MockSettingsStore, add_element, key


def _write_keymap(path: Path, keymap: dict) -> Path:
    path.write_text(json.dumps({"keymap": keymap}), encoding="utf-8")
    return path


def _chords(bindings: list[Binding], action: str) -> list[str]:
    return [binding.chord for binding in bindings if binding.action == action]


class TestKeymapManager:
    """Test the KeymapManager class."""

    def test_initialize_with_no_custom_keymap(self):
        """Should use default bindings when no custom keymap is specified."""
        manager = KeymapManager(settings_store=MockSettingsStore({}))

        settings = manager.initialize()

        assert settings == {}
        assert manager.get_custom_keymap_name() is None
        assert manager.get_custom_keymap_path() is None
        assert manager.bindings == DEFAULT_BINDINGS

    def test_initialize_with_default_keymap_setting(self):
        """Should use default bindings when custom_keymap is set to 'default'."""
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": "default"}))

        manager.initialize()

        assert manager.get_custom_keymap_name() is None
        assert manager.bindings == DEFAULT_BINDINGS

    def test_load_custom_keymap_from_absolute_path(self, tmp_path: Path):
        """Should load custom bindings from an absolute path."""
        keymap_file = _write_keymap(
            tmp_path / "custom.json",
            {"normal": [{"chord": "x", "action": "scroll_down"}]},
        )
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        normal = manager.bindings[Mode.NORMAL]
        assert _chords(normal, "scroll_down") == ["x"]
        assert _chords(normal, "scroll_up") == ["k"]
        assert manager.get_custom_keymap_name() == str(keymap_file)
        assert manager.get_custom_keymap_path() == keymap_file.resolve()

    def test_load_custom_keymap_by_name(self, tmp_path: Path, monkeypatch):
        """Should resolve a bare name inside the keymaps directory."""
        monkeypatch.setattr(keymap_module, "CUSTOM_KEYMAP_DIR", tmp_path)
        _write_keymap(tmp_path / "mine.json", {"caret": [{"chord": "S-4", "action": "move_line_down"}]})
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": "mine"}))

        manager.initialize()

        assert manager.get_custom_keymap_name() == "mine"
        assert _chords(manager.bindings[Mode.VISUAL_CARET], "move_line_down") == ["S-4"]

    def test_flat_keymap_structure(self, tmp_path: Path):
        """Should accept a file without the outer "keymap" object."""
        keymap_file = tmp_path / "flat.json"
        keymap_file.write_text(
            json.dumps({"visual": [{"chord": "Y", "action": "copy_selection"}]}),
            encoding="utf-8",
        )
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        assert _chords(manager.bindings[Mode.VISUAL_RANGE], "copy_selection") == ["Y"]

    def test_chord_whitespace_is_normalized(self, tmp_path: Path):
        """Should collapse repeated spaces inside a chord."""
        keymap_file = _write_keymap(
            tmp_path / "spaces.json",
            {"normal": [{"chord": " <leader>   q ", "action": "close_tab"}]},
        )
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        assert _chords(manager.bindings[Mode.NORMAL], "close_tab") == ["<leader> q"]

    def test_custom_chord_takes_over_default(self, tmp_path: Path):
        """A custom chord should replace the default binding that used it."""
        keymap_file = _write_keymap(
            tmp_path / "swap.json",
            {"normal": [{"chord": "j", "action": "scroll_up"}]},
        )
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        normal = manager.bindings[Mode.NORMAL]
        assert _chords(normal, "scroll_up") == ["j"]
        assert _chords(normal, "scroll_down") == []

    def test_invalid_json_falls_back_to_default(self, tmp_path: Path, caplog):
        """Should keep default bindings on invalid JSON."""
        keymap_file = tmp_path / "invalid.json"
        keymap_file.write_text("{ invalid json }", encoding="utf-8")
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        assert "Failed to load custom keymap" in caplog.text
        assert "Failed to read keymap JSON" in caplog.text
        assert manager.get_custom_keymap_name() is None
        assert manager.bindings == DEFAULT_BINDINGS

    def test_missing_keymap_file(self, tmp_path: Path, caplog):
        """Should log a warning when the keymap file does not exist."""
        keymap_file = tmp_path / "nonexistent.json"
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        assert "Failed to load custom keymap" in caplog.text
        assert "not found" in caplog.text

    def test_reset_to_default(self, tmp_path: Path):
        """Should reset to the default bindings."""
        keymap_file = _write_keymap(
            tmp_path / "test.json",
            {"normal": [{"chord": "x", "action": "scroll_down"}]},
        )
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))
        manager.initialize()

        assert manager.get_custom_keymap_name() is not None

        manager.reset_to_default()

        assert manager.get_custom_keymap_name() is None
        assert manager.get_custom_keymap_path() is None
        assert manager.bindings == DEFAULT_BINDINGS

    def test_bindings_are_copies(self):
        """Mutating the returned bindings should not affect the manager."""
        manager = KeymapManager(settings_store=MockSettingsStore({}))
        manager.bindings[Mode.NORMAL].clear()
        assert manager.bindings[Mode.NORMAL] == DEFAULT_BINDINGS[Mode.NORMAL]

    @pytest.mark.parametrize(
        "keymap,message",
        [
            ({"insert": []}, 'Unknown keymap section "insert"'),
            ({"normal": {}}, '"normal" must be a list'),
            ({"normal": ["x"]}, 'Binding at index 0 of "normal" must be an object'),
            (
                {"normal": [{"chord": "x", "action": "scroll_down"}, {"action": "scroll_up"}]},
                'Binding at index 1 of "normal" missing required "chord"',
            ),
            ({"caret": [{"chord": "x"}]}, 'Binding at index 0 of "caret" missing required "action"'),
            (
                {"visual": [{"chord": "x", "action": "launch"}]},
                'Binding at index 0 of "visual" has unknown action "launch"',
            ),
            ({"normal": [{"chord": "g", "action": "scroll_down"}]}, 'Chord "g" is a prefix of "g g"'),
        ],
    )
    def test_invalid_keymap(self, tmp_path: Path, caplog, keymap, message):
        """Should reject invalid keymaps with a specific error and keep defaults."""
        keymap_file = _write_keymap(tmp_path / "invalid.json", keymap)
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))

        manager.initialize()

        assert message in caplog.text
        assert manager.bindings == DEFAULT_BINDINGS

    def test_custom_bindings_drive_the_machine(self, tmp_path: Path):
        """A machine built from merged bindings should honour the custom chord."""
        keymap_file = _write_keymap(
            tmp_path / "custom.json",
            {"normal": [{"chord": "x", "action": "scroll_down"}]},
        )
        manager = KeymapManager(settings_store=MockSettingsStore({"custom_keymap": str(keymap_file)}))
        manager.initialize()

        document = MemoryDocument(viewport_height=400)
        add_element(document.body, "div", 1000, height=200)
        machine = ModeStateMachine(document, bindings=manager.bindings)

        assert machine.handle_keydown(key("x")).action == "scroll_down"
        assert document.html.scroll_top == 70
        assert not machine.handle_keydown(key("j")).consumed


class TestMergeBindings:
    """Test merge_bindings and check_prefix_conflicts."""

    def test_untouched_actions_keep_defaults(self):
        """Actions the custom list does not mention keep their chords."""
        defaults = [Binding("c", "collapse_to_caret"), Binding("v", "collapse_to_caret"), Binding("y", "copy_selection")]
        merged = merge_bindings(defaults, [Binding("Y", "copy_selection")])
        assert merged == [
            Binding("c", "collapse_to_caret"),
            Binding("v", "collapse_to_caret"),
            Binding("Y", "copy_selection"),
        ]

    def test_rebinding_drops_all_default_chords(self):
        """A rebound action loses every default chord."""
        defaults = [Binding("c", "collapse_to_caret"), Binding("v", "collapse_to_caret")]
        merged = merge_bindings(defaults, [Binding("x", "collapse_to_caret")])
        assert merged == [Binding("x", "collapse_to_caret")]

    def test_prefix_conflict(self):
        """Should raise when one chord starts another."""
        with pytest.raises(KeymapError, match='Chord "g" is a prefix of "g g"'):
            check_prefix_conflicts([Binding("g g", "scroll_to_top"), Binding("g", "scroll_down")])

    def test_shared_first_token_is_fine(self):
        """Chords that only share a prefix token do not conflict."""
        check_prefix_conflicts([Binding("g g", "scroll_to_top"), Binding("g f", "hint_click")])

    def test_default_bindings_have_no_conflicts(self):
        """The shipped defaults are conflict free in every mode."""
        for bindings in DEFAULT_BINDINGS.values():
            check_prefix_conflicts(bindings)
