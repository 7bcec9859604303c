"""A small Textual page to try keyboard navigation on."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.events import Key
from textual.widgets import Button, Checkbox, Footer, Input, Link, Static, TextArea

from ..config import DEFAULT_HINT_SELECTOR, DEFAULT_INPUT_SELECTOR, DEFAULT_LINK_SELECTOR, Settings
from ..engine.machine import ModeStateMachine
from ..messaging import TabMessenger
from .navigator import KeyboardNavigator

# Textual selects by widget type; attribute selectors do not exist there.
TEXTUAL_HINT_SELECTOR = "Button,Checkbox,RadioButton,Switch,Input,TextArea,Select,Link"
TEXTUAL_INPUT_SELECTOR = "Input,TextArea,Select"
TEXTUAL_LINK_SELECTOR = "Link"


def textual_settings(settings: Settings | None = None) -> Settings:
    """Settings with browser-default selectors swapped for widget selectors."""
    settings = settings or Settings()
    changes: dict[str, Any] = {}
    if settings.hint_selector == DEFAULT_HINT_SELECTOR:
        changes["hint_selector"] = TEXTUAL_HINT_SELECTOR
    if settings.input_selector == DEFAULT_INPUT_SELECTOR:
        changes["input_selector"] = TEXTUAL_INPUT_SELECTOR
    if settings.link_selector == DEFAULT_LINK_SELECTOR:
        changes["link_selector"] = TEXTUAL_LINK_SELECTOR
    return replace(settings, **changes)


class NotifyingMessenger(TabMessenger):
    """Tab channel for the demo: messages are shown as notifications."""

    def __init__(self, app: App) -> None:
        self._app = app

    def send(self, message_type: str, payload: dict[str, Any]) -> Any:
        details = ", ".join(f"{key}={value!r}" for key, value in payload.items())
        self._app.notify(f"{message_type}({details})", title="Tab message")
        return None


class DemoApp(App):
    """Scrollable page of buttons, inputs and links driven from the keyboard."""

    CSS = """
    #status-bar {
        dock: top;
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    #page {
        height: 1fr;
    }

    #page > * {
        margin: 0 2 1 2;
    }

    #notes {
        height: 6;
    }
    """

    def __init__(self, settings: Settings | None = None, **navigator_options: Any) -> None:
        super().__init__()
        self.navigator = KeyboardNavigator(
            self,
            settings=textual_settings(settings),
            messenger=NotifyingMessenger(self),
            on_change=self._update_status_bar,
            **navigator_options,
        )

    def compose(self) -> ComposeResult:
        yield Static(id="status-bar")
        with VerticalScroll(id="page"):
            yield Static("[bold]quicksilver[/] press [bold]f[/] to hint, [bold]S-?[/] for help")
            for i in range(1, 31):
                yield Button(f"Button {i}", id=f"button-{i}")
                if i % 5 == 0:
                    yield Checkbox(f"Option {i // 5}")
                    yield Link(f"Link {i // 5}", url=f"https://example.com/{i // 5}")
            yield Input(placeholder="Name")
            yield TextArea(id="notes")
        yield Footer()

    def on_mount(self) -> None:
        machine = self.navigator.attach(self.screen)
        self._update_status_bar(machine)

    def on_key(self, event: Key) -> None:
        self.navigator.handle_key(event)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.notify(f"Pressed {event.button.label}")

    def _update_status_bar(self, machine: ModeStateMachine) -> None:
        mode = machine.mode.value
        if machine.passthrough:
            mode += " (passthrough)"
        buffer = f"  [bold $warning]{machine.chord_buffer}[/]" if machine.chord_buffer else ""
        self.query_one("#status-bar", Static).update(f"[bold]{mode}[/]{buffer}")


def run_demo(settings: Settings | None = None, **navigator_options: Any) -> None:
    DemoApp(settings, **navigator_options).run()
