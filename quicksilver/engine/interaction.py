"""Applying an interaction intent to a hinted element."""

from __future__ import annotations

import logging
from typing import Any

from ..core.state import (
    Click,
    DoubleClick,
    Focus,
    Hover,
    InteractionIntent,
    OpenInNewTab,
    TabTarget,
)
from ..host.protocols import DocumentProvider, ElementInfo
from ..messaging import TabMessenger, send_quietly

logger = logging.getLogger(__name__)

# Input types that are clicked like buttons rather than typed into
NON_TEXT_INPUT_TYPES = frozenset({"checkbox", "radio", "file", "color", "button", "submit"})

_WINDOW_FOR_TARGET = {
    TabTarget.BACKGROUND: "current",
    TabTarget.FOREGROUND: "current",
    TabTarget.NEW_WINDOW: "new",
    TabTarget.PRIVATE_WINDOW: "private",
}


def is_text_input_like(info: ElementInfo) -> bool:
    """Whether keystrokes aimed at this element are meant as typing."""
    if info.tag == "input":
        return (info.input_type or "text") not in NON_TEXT_INPUT_TYPES
    if info.tag == "textarea":
        return True
    return info.editable and not info.read_only


def effective_intent(info: ElementInfo, intent: InteractionIntent) -> InteractionIntent:
    if is_text_input_like(info):
        return Focus()
    return intent


def apply_intent(
    document: DocumentProvider,
    messenger: TabMessenger,
    element: Any,
    intent: InteractionIntent,
) -> None:
    """Perform ``intent`` on ``element``.

    New tabs are never opened locally: the link is handed to the tab channel.
    An OpenInNewTab on an element without a link does nothing.
    """
    info = document.describe(element)
    intent = effective_intent(info, intent)
    logger.debug("Applying %s to <%s>", type(intent).__name__, info.tag)

    if isinstance(intent, OpenInNewTab):
        if not info.href:
            logger.debug("Element <%s> has no link to open", info.tag)
            return
        send_quietly(
            messenger,
            "open_new_tab",
            url=info.href,
            background=intent.target is TabTarget.BACKGROUND,
            position="after",
            window=_WINDOW_FOR_TARGET[intent.target],
            cookie_store_id=intent.profile,
        )
    elif isinstance(intent, Focus):
        document.focus(element)
    elif isinstance(intent, DoubleClick):
        document.double_click(element)
    elif isinstance(intent, Hover):
        document.hover(element)
    elif isinstance(intent, Click):
        document.click(element)
