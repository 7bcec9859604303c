"""Overlay collaborator interface.

The engine decides what is labeled and when; drawing is the host's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..core.chords import ActionTable
    from ..core.state import Candidate


class HintOverlay(ABC):
    """What the engine asks of a rendering layer."""

    @abstractmethod
    def show_hints(self, hints: dict[str, Candidate]) -> None:
        """Draw one label per candidate, replacing any previous labels."""

    @abstractmethod
    def prune_hints(self, dropped: list[str], typed: str) -> None:
        """Remove the dropped labels and mark ``typed`` as matched on the rest."""

    @abstractmethod
    def clear_hints(self) -> None: ...

    @abstractmethod
    def show_pending_chords(self, chords: list[tuple[str, str]]) -> None:
        """Show (chord, description) suggestions; an empty list hides them."""

    @abstractmethod
    def toggle_help(self, table: ActionTable) -> None: ...

    @abstractmethod
    def toggle_link_list(self, links: list[Any]) -> None: ...

    @abstractmethod
    def hide_popups(self) -> None:
        """Close the help and link list popups."""


class NullOverlay(HintOverlay):
    """Overlay for headless use: nothing is drawn."""

    def show_hints(self, hints: dict[str, Candidate]) -> None:
        pass

    def prune_hints(self, dropped: list[str], typed: str) -> None:
        pass

    def clear_hints(self) -> None:
        pass

    def show_pending_chords(self, chords: list[tuple[str, str]]) -> None:
        pass

    def toggle_help(self, table: ActionTable) -> None:
        pass

    def toggle_link_list(self, links: list[Any]) -> None:
        pass

    def hide_popups(self) -> None:
        pass
