"""Help and link list popups."""

from __future__ import annotations

from typing import Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Static

from ..core.chords import ActionTable


def format_chord(chord: str) -> str:
    """Rich markup for a chord, one highlighted key per token."""
    return " ".join(f"[bold $warning]{escape(token)}[/]" for token in chord.split(" "))


class HelpScreen(ModalScreen):
    """Modal listing the chords of one action table."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
        Binding("question_mark", "dismiss", "Close", show=False),
    ]

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-popup {
        width: auto;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }
    """

    def __init__(self, table: ActionTable) -> None:
        super().__init__()
        self._table = table

    def compose(self) -> ComposeResult:
        lines = ["[bold $text-muted]Keys[/]"]
        for chord, action in self._table.items():
            lines.append(f"  {format_chord(chord)} {escape(action.description)}")
        lines.append("")
        lines.append("[$primary]Close: <esc>[/]")
        yield Static("\n".join(lines), id="help-popup")

    def action_dismiss(self) -> None:
        self.dismiss(None)


class LinkListScreen(ModalScreen):
    """Modal listing the links on screen; selecting one reports it."""

    BINDINGS = [Binding("escape", "dismiss", "Close", show=False)]

    CSS = """
    LinkListScreen {
        align: center middle;
    }

    #link-list {
        width: auto;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }
    """

    def __init__(self, links: list[Any]) -> None:
        super().__init__()
        self._links = links

    def compose(self) -> ComposeResult:
        lines = ["[bold $text-muted]Links[/]"]
        if not self._links:
            lines.append("  [dim]No links on screen[/]")
        for link in self._links:
            url = getattr(link, "url", None) or ""
            label = getattr(link, "text", None) or url or type(link).__name__
            lines.append(f"  {escape(str(label))} [dim]{escape(str(url))}[/]")
        lines.append("")
        lines.append("[$primary]Close: <esc>[/]")
        yield Static("\n".join(lines), id="link-list")

    def action_dismiss(self) -> None:
        self.dismiss(None)
