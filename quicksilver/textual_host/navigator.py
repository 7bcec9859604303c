"""Wiring the engine into a Textual app.

The app forwards its key events to a KeyboardNavigator; hint labels and
chord suggestions are drawn by a HintLayer mounted on the screen.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.events import Key
from textual.screen import ModalScreen, Screen
from textual.widget import Widget
from textual.widgets import Label, Static

from ..config import Settings
from ..core.chords import ActionTable
from ..core.state import Candidate, ElementCandidate
from ..engine.machine import ModeStateMachine
from ..engine.overlay import HintOverlay
from ..messaging import TabMessenger
from .keys import key_event_from_textual
from .provider import TextualDocument
from .screens import HelpScreen, LinkListScreen, format_chord

if TYPE_CHECKING:
    from textual.app import App

    from ..engine.keymap import KeymapManager
    from ..stores import SettingsStore

logger = logging.getLogger(__name__)


class HintLayer(Widget):
    """Screen-wide overlay holding hint labels and the chord suggestion bar."""

    DEFAULT_CSS = """
    HintLayer {
        overlay: screen;
        position: absolute;
        width: 100%;
        height: 100%;
    }

    HintLayer .hint-label {
        position: absolute;
        width: auto;
        height: 1;
        background: $warning;
        color: $background;
        text-style: bold;
    }

    HintLayer #chord-suggestions {
        dock: bottom;
        height: auto;
        background: $surface;
        padding: 0 1;
        display: none;
    }

    HintLayer #chord-suggestions.visible {
        display: block;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="hint-layer")
        self._labels: dict[str, Label] = {}

    def compose(self) -> ComposeResult:
        yield Static(id="chord-suggestions")

    def show_hints(self, positions: dict[str, tuple[int, int]]) -> None:
        self.clear_hints()
        for text, (x, y) in positions.items():
            label = Label(text, classes="hint-label")
            label.styles.offset = (x, y)
            self._labels[text] = label
        self.mount_all(self._labels.values())

    def prune_hints(self, dropped: list[str], typed: str) -> None:
        for text in dropped:
            label = self._labels.pop(text, None)
            if label is not None:
                label.remove()
        for text, label in self._labels.items():
            label.update(f"[dim]{escape(typed)}[/]{escape(text[len(typed):])}")

    def clear_hints(self) -> None:
        for label in self._labels.values():
            label.remove()
        self._labels.clear()

    def show_suggestions(self, chords: list[tuple[str, str]]) -> None:
        bar = self.query_one("#chord-suggestions", Static)
        if not chords:
            bar.remove_class("visible")
            bar.update("")
            return
        bar.update("\n".join(f"{format_chord(chord)} {escape(text)}" for chord, text in chords))
        bar.add_class("visible")


class TextualOverlay(HintOverlay):
    """HintOverlay drawing into a HintLayer and opening popups as modal screens."""

    def __init__(self, layer: HintLayer, document: TextualDocument) -> None:
        self._layer = layer
        self._document = document

    def show_hints(self, hints: dict[str, Candidate]) -> None:
        positions = {}
        for text, candidate in hints.items():
            if isinstance(candidate, ElementCandidate):
                rect = self._document.bounding_rect(candidate.element)
                positions[text] = (int(rect.x), int(rect.y))
        self._layer.show_hints(positions)

    def prune_hints(self, dropped: list[str], typed: str) -> None:
        self._layer.prune_hints(dropped, typed)

    def clear_hints(self) -> None:
        self._layer.clear_hints()

    def show_pending_chords(self, chords: list[tuple[str, str]]) -> None:
        self._layer.show_suggestions(chords)

    def toggle_help(self, table: ActionTable) -> None:
        self._toggle(HelpScreen, lambda: HelpScreen(table))

    def toggle_link_list(self, links: list[Any]) -> None:
        self._toggle(LinkListScreen, lambda: LinkListScreen(links))

    def hide_popups(self) -> None:
        app = self._layer.app
        while isinstance(app.screen, (HelpScreen, LinkListScreen)):
            app.pop_screen()

    def _toggle(self, screen_type: type[ModalScreen], factory: Callable[[], ModalScreen]) -> None:
        app = self._layer.app
        if isinstance(app.screen, screen_type):
            app.pop_screen()
            return
        self.hide_popups()
        app.push_screen(factory())


class KeyboardNavigator:
    """Routes a Textual app's key events through a ModeStateMachine.

    Call ``attach`` once the screen is mounted and forward every ``Key``
    event to ``handle_key`` from the app's ``on_key``.
    """

    def __init__(
        self,
        app: App,
        settings: Settings | None = None,
        messenger: TabMessenger | None = None,
        config_source: SettingsStore | None = None,
        keymap: KeymapManager | None = None,
        on_change: Callable[[ModeStateMachine], None] | None = None,
    ) -> None:
        self.app = app
        self.settings = settings or Settings()
        self.messenger = messenger
        self.config_source = config_source
        self.keymap = keymap
        self.on_change = on_change
        self.machine: ModeStateMachine | None = None
        self.layer: HintLayer | None = None

    def attach(self, screen: Screen) -> ModeStateMachine:
        if self.machine is not None:
            self.machine.close()
        self.layer = HintLayer()
        screen.mount(self.layer)
        document = TextualDocument(screen, skip=(HintLayer,))
        self.machine = ModeStateMachine(
            document,
            messenger=self.messenger,
            overlay=TextualOverlay(self.layer, document),
            settings=self.settings,
            config_source=self.config_source,
            clipboard=self.app.copy_to_clipboard,
            bindings=self.keymap.bindings if self.keymap is not None else None,
        )
        logger.debug("Keyboard navigation attached to %s", type(screen).__name__)
        return self.machine

    def handle_key(self, event: Key) -> bool:
        """Feed one key event; returns True when the engine consumed it."""
        if self.machine is None:
            return False
        # Popups handle their own keys
        if isinstance(self.app.screen, ModalScreen):
            return False

        result = self.machine.handle_keydown(key_event_from_textual(event, target=self.app.focused))
        if result.consumed:
            event.prevent_default()
            event.stop()
        if self.on_change is not None:
            self.on_change(self.machine)
        return result.consumed

    def detach(self) -> None:
        if self.machine is not None:
            self.machine.close()
            self.machine = None
        if self.layer is not None:
            self.layer.remove()
            self.layer = None
