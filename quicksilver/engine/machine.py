"""Modal key dispatch.

The ModeStateMachine sits between the host's keyboard callbacks and
everything else. Per keydown it runs, in order:

1. modifier-only keys are ignored
2. transient listeners (most recent first) get first refusal
3. a blocked or globally disabled page lets every key through
4. the focus guard hands typing in text controls back to the page
5. passthrough ignores everything but its own toggle chord
6. Escape resets to Normal unless the mode's table binds it
7. in Hinting mode, the key narrows the hint labels
8. otherwise the key goes through the gate into the chord resolver

A single key event causes at most one mode transition and at most one
action invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from ..blocklist import is_enabled_for
from ..config import DEFAULT_HINT_SELECTOR, HINT_SELECTOR_KEY, Settings
from ..core.chords import ActionTable, ChordOutcome, ChordResolver
from ..core.keys import KeyEvent, is_escape, is_modifier_key, key_token
from ..core.labels import DEFAULT_ALPHABET, HintLabelAllocator
from ..core.listeners import KeyListener, ListenerStack, Unregister
from ..core.state import (
    Candidate,
    Click,
    ElementCandidate,
    EngineState,
    HintOutcome,
    HintSession,
    InteractionIntent,
    Mode,
    TextSpanCandidate,
)
from ..host.protocols import DocumentProvider, SelectionProvider
from ..messaging import NullMessenger, TabMessenger, send_quietly
from ..scanning import CandidateScanner, WordSpanScanner
from ..selection.search import CharacterSearch
from .actions import Binding, build_tables
from .interaction import apply_intent, is_text_input_like
from .overlay import HintOverlay, NullOverlay
from .scrolling import Scroller

if TYPE_CHECKING:
    from ..stores import SettingsStore

logger = logging.getLogger(__name__)


@dataclass
class KeyResult:
    """Result of processing a key event."""

    consumed: bool = False  # Host should stop the event from reaching the page
    action: str | None = None  # Name of the action invoked, if any


class ModeStateMachine:
    """Owns the mode, chord buffer, hint session and search memory of one
    document context."""

    def __init__(
        self,
        document: DocumentProvider,
        selection: SelectionProvider | None = None,
        *,
        messenger: TabMessenger | None = None,
        overlay: HintOverlay | None = None,
        settings: Settings | None = None,
        config_source: SettingsStore | None = None,
        clipboard: Callable[[str], None] | None = None,
        bindings: dict[Mode, list[Binding]] | None = None,
        url: str | None = None,
    ) -> None:
        self.document = document
        self.selection = selection
        self.messenger = messenger or NullMessenger()
        self.overlay = overlay or NullOverlay()
        self.settings = settings or Settings()
        self.url = url
        self._clipboard = clipboard

        self._state = EngineState()
        self._listeners = ListenerStack()
        self._scanner = CandidateScanner(document)
        self._word_scanner = WordSpanScanner(document)
        self.scroller = Scroller(document, self.settings.scroll_step)
        self.character_search = (
            CharacterSearch(document, selection, self._state.search) if selection is not None else None
        )

        self._tables = build_tables(self, bindings)
        self._resolver = ChordResolver(self._tables[Mode.NORMAL])
        normal = self._tables[Mode.NORMAL]
        self._passthrough_resolver = ChordResolver(
            ActionTable({chord: normal[chord] for chord in normal.chords_for("toggle_passthrough")})
        )

        # Lowercased keys whose keydown was consumed; their keyup is too
        self._consumed_keys: set[str] = set()
        self._unregister_capture: Unregister | None = None
        self._unwatch: Callable[[], None] | None = None
        if config_source is not None:
            self._unwatch = config_source.watch(HINT_SELECTOR_KEY, self._on_hint_selector_changed)

    # ─────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def passthrough(self) -> bool:
        return self._state.passthrough

    @property
    def hint_session(self) -> HintSession | None:
        return self._state.hint_session

    @property
    def is_session_active(self) -> bool:
        """True while a hint session or a visual mode is running."""
        return self._state.is_session_active

    @property
    def is_enabled(self) -> bool:
        return is_enabled_for(self.url, self.settings.disabled_globally, self.settings.blocklist)

    @property
    def chord_buffer(self) -> str:
        return self._resolver.buffer

    def table_for(self, mode: Mode) -> ActionTable:
        return self._tables.get(mode, self._tables[Mode.NORMAL])

    def pending_chords(self) -> list[tuple[str, str]]:
        """(chord, description) for every chord the current buffer can still reach."""
        table = self._resolver.table
        return [(chord, table[chord].description) for chord in self._resolver.pending()]

    def enter_mode(self, mode: Mode) -> None:
        """Transition to ``mode``, clearing whatever the old mode owned."""
        old_mode = self._state.mode
        self._state.enter_mode(mode)
        if old_mode is Mode.HINTING and mode is not Mode.HINTING:
            self.overlay.clear_hints()
        if old_mode.is_visual and not mode.is_visual:
            self._cancel_capture()
        if mode in self._tables:
            self._resolver.table = self._tables[mode]
        else:
            self._resolver.reset()
        if old_mode is not mode:
            logger.debug("Mode %s -> %s", old_mode.name, mode.name)

    def reset_state(self, hide_popups: bool = True) -> None:
        """Return to Normal with no session, chord or pending capture left."""
        self.enter_mode(Mode.NORMAL)
        self._resolver.reset()
        self._passthrough_resolver.reset()
        self._cancel_capture()
        self.overlay.clear_hints()
        self.overlay.show_pending_chords([])
        if hide_popups:
            self.hide_all_popups()

    def hide_all_popups(self) -> None:
        self.overlay.hide_popups()

    def toggle_passthrough(self) -> None:
        passthrough = not self._state.passthrough
        if passthrough:
            self.reset_state(hide_popups=True)
        self._state.passthrough = passthrough
        logger.debug("Passthrough %s", "on" if passthrough else "off")

    def close(self) -> None:
        """Detach from the configuration source and drop all state."""
        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None
        self.reset_state(hide_popups=True)

    def _on_hint_selector_changed(self, value: Any) -> None:
        if isinstance(value, str) and value.strip():
            self.settings.hint_selector = value
        else:
            self.settings.hint_selector = DEFAULT_HINT_SELECTOR
        logger.debug("Hint selector changed to %r", self.settings.hint_selector)

    # ─────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────

    def register_keydown_listener(self, listener: KeyListener) -> Unregister:
        return self._listeners.register_keydown(listener)

    def register_keyup_listener(self, listener: KeyListener) -> Unregister:
        return self._listeners.register_keyup(listener)

    def capture_char(self, callback: Callable[[str], Any]) -> None:
        """Hand the next printable key to ``callback``; Escape cancels."""
        self._cancel_capture()

        def listener(event: KeyEvent) -> bool:
            self._cancel_capture()
            if len(event.key) == 1 and not event.has_command_modifier:
                callback(event.key)
            return True

        self._unregister_capture = self.register_keydown_listener(listener)

    def _cancel_capture(self) -> None:
        if self._unregister_capture is not None:
            self._unregister_capture()
            self._unregister_capture = None

    # ─────────────────────────────────────────────────────────────────
    # Key handling
    # ─────────────────────────────────────────────────────────────────

    def handle_keydown(self, event: KeyEvent) -> KeyResult:
        """Process a keydown.

        Returns:
            KeyResult; ``consumed`` tells the host to stop the event.
        """
        if is_modifier_key(event.key):
            return KeyResult()

        if self._listeners.dispatch_keydown(event):
            return self._consume(event)

        if not self.is_enabled:
            return KeyResult()

        if self._is_typing(event):
            if self.is_session_active or self._resolver.buffer:
                self.reset_state(hide_popups=False)
            return KeyResult()

        token = key_token(event, self.settings.leader_key)

        if self._state.passthrough:
            return self._handle_passthrough(event, token)

        if is_escape(event):
            if "escape" not in self.table_for(self.mode):
                return self._handle_escape(event)
            # A half-typed chord never swallows the mode's own Escape
            self._resolver.reset()

        if self.mode is Mode.HINTING:
            return self._handle_hint_key(event)

        return self._handle_chord(event, token)

    def handle_keyup(self, event: KeyEvent) -> KeyResult:
        if self._listeners.dispatch_keyup(event):
            return KeyResult(consumed=True)
        key = event.key.lower()
        if key in self._consumed_keys:
            self._consumed_keys.discard(key)
            return KeyResult(consumed=True)
        return KeyResult()

    def _consume(self, event: KeyEvent, action: str | None = None) -> KeyResult:
        self._consumed_keys.add(event.key.lower())
        return KeyResult(consumed=True, action=action)

    def _is_typing(self, event: KeyEvent) -> bool:
        for element in (event.target, self.document.active_element()):
            if element is None or not self.document.is_element(element):
                continue
            if is_text_input_like(self.document.describe(element)):
                return True
        return False

    def _handle_passthrough(self, event: KeyEvent, token: str) -> KeyResult:
        result = self._passthrough_resolver.feed(token)
        if result.outcome is ChordOutcome.RESOLVED:
            return self._invoke(result.action, event)
        if result.outcome is ChordOutcome.PENDING:
            return self._consume(event)
        return KeyResult()

    def _handle_escape(self, event: KeyEvent) -> KeyResult:
        active = self.is_session_active or bool(self._resolver.buffer)
        self.reset_state(hide_popups=True)
        if active:
            return self._consume(event)
        return KeyResult()

    def _handle_hint_key(self, event: KeyEvent) -> KeyResult:
        session = self._state.hint_session
        if session is None or len(event.key) != 1 or event.has_command_modifier:
            return KeyResult()

        char = event.key if event.key in self.settings.hint_alphabet else event.key.lower()
        outcome, dropped = session.feed(char)

        if outcome is HintOutcome.PENDING:
            self.overlay.prune_hints(dropped, session.typed)
        elif outcome is HintOutcome.RESOLVED:
            candidate = session.resolved
            next_mode = Mode.NORMAL
            try:
                next_mode = session.on_resolve(candidate)
            except Exception as exc:
                logger.warning("Hint interaction failed: %s", exc)
            self.enter_mode(next_mode)
        else:
            logger.debug("No hint label starts with %r", session.typed)
            self.enter_mode(Mode.NORMAL)
        return self._consume(event)

    def _handle_chord(self, event: KeyEvent, token: str) -> KeyResult:
        table = self._resolver.table
        if not self._resolver.buffer and not table.is_relevant(token):
            return KeyResult()

        result = self._resolver.feed(token)
        if result.outcome is ChordOutcome.PENDING:
            self.overlay.show_pending_chords(self.pending_chords())
            return self._consume(event)

        self.overlay.show_pending_chords([])
        if result.outcome is ChordOutcome.NO_MATCH:
            logger.debug("No chord matches %r", result.chord)
            return KeyResult()
        return self._invoke(result.action, event)

    def _invoke(self, action: Any, event: KeyEvent) -> KeyResult:
        try:
            action(event)
        except Exception as exc:
            logger.warning("Action %s failed: %s", action.name, exc)
            self.reset_state(hide_popups=True)
        return self._consume(event, action.name)

    # ─────────────────────────────────────────────────────────────────
    # Hinting
    # ─────────────────────────────────────────────────────────────────

    def highlight_elements_by_selector(
        self,
        selector: str,
        intent: InteractionIntent | None = None,
        check_opacity: bool = True,
    ) -> bool:
        """Label the visible elements matching ``selector`` and enter Hinting.

        Returns:
            False when nothing on screen matched; the mode is left unchanged.
        """
        intent = intent or Click()
        self._clear_hint_session()
        try:
            candidates = self._scanner.scan(selector, check_opacity=check_opacity)
        except ValueError as exc:
            logger.warning("Cannot scan for %r: %s", selector, exc)
            return False
        return self._start_session(candidates, partial(self._resolve_element, intent))

    def start_word_hinting(self) -> bool:
        """Label visible words; choosing one places the caret at its start."""
        self._clear_hint_session()
        return self._start_session(self._word_scanner.scan(), self._resolve_word)

    def enter_visual(self) -> None:
        if self.selection is None:
            return
        if not self.selection.is_collapsed():
            self.enter_mode(Mode.VISUAL_RANGE)
        else:
            self.start_word_hinting()

    def toggle_link_list(self) -> None:
        candidates = self._scanner.scan(self.settings.link_selector)
        self.overlay.toggle_link_list([candidate.element for candidate in candidates])

    def _clear_hint_session(self) -> None:
        # A new scan always tears down the previous session first.
        if self.mode is Mode.HINTING:
            self.enter_mode(Mode.NORMAL)
        elif self._state.hint_session is not None:
            self._state.hint_session = None
            self.overlay.clear_hints()

    def _start_session(
        self,
        candidates: list[Candidate],
        on_resolve: Callable[[Any], Mode],
    ) -> bool:
        labels = self._allocator().allocate(len(candidates))
        if len(labels) < len(candidates):
            logger.debug("Out of labels: %d candidates left unlabeled", len(candidates) - len(labels))
        if not labels:
            return False

        hints = dict(zip(labels, candidates))
        self.enter_mode(Mode.HINTING)
        self._state.hint_session = HintSession(hints, on_resolve)
        self.overlay.show_hints(hints)
        return True

    def _allocator(self) -> HintLabelAllocator:
        try:
            return HintLabelAllocator(self.settings.hint_alphabet, self.settings.single_char_hints)
        except ValueError as exc:
            logger.warning("Invalid hint alphabet, using default: %s", exc)
            return HintLabelAllocator(DEFAULT_ALPHABET, self.settings.single_char_hints)

    def _resolve_element(self, intent: InteractionIntent, candidate: ElementCandidate) -> Mode:
        self.scroller.remember(candidate.element)
        apply_intent(self.document, self.messenger, candidate.element, intent)
        return Mode.NORMAL

    def _resolve_word(self, candidate: TextSpanCandidate) -> Mode:
        if self.selection is None:
            return Mode.NORMAL
        self.selection.collapse(candidate.node, candidate.start)
        return Mode.VISUAL_CARET

    # ─────────────────────────────────────────────────────────────────
    # Collaborators
    # ─────────────────────────────────────────────────────────────────

    def send_tab_message(self, method: str, *args: Any, **kwargs: Any) -> bool:
        return send_quietly(self.messenger, method, *args, **kwargs)

    def copy_to_clipboard(self, text: str) -> None:
        if self._clipboard is None:
            logger.debug("No clipboard available")
            return
        try:
            self._clipboard(text)
        except Exception as exc:
            logger.warning("Copy to clipboard failed: %s", exc)
