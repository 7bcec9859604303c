"""Tab/window messaging channel.

Privileged browser actions (opening, activating, moving and closing tabs) are
outside the engine's authority. They are sent as fire-and-forget messages to a
tab-management collaborator; replies, when the host provides them, are matched
by message type. Nothing is retried.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

# Message types understood by the tab-management collaborator
GET_ACTIVE_TAB = "getActiveTab"
GET_ALL_TABS = "getAllTabs"
GET_ALL_CONTAINERS = "getAllContainers"
GO_TO_TAB = "goToTab"
OPEN_NEW_TAB = "openNewTab"
ACTIVATE_TAB = "activateTab"
DUPLICATE_TAB = "duplicateTab"
CLOSE_TAB = "closeTab"
SEARCH = "search"
MOVE_TAB_NEXT_TO_CURRENT = "moveTabNextToCurrentTab"
MOVE_TAB_TO_NEW_WINDOW = "moveTabToNewWindow"
REOPEN_TAB_IN_PRIVATE_WINDOW = "reopenTabInPrivateWindow"

MESSAGE_TYPES = frozenset({
    GET_ACTIVE_TAB,
    GET_ALL_TABS,
    GET_ALL_CONTAINERS,
    GO_TO_TAB,
    OPEN_NEW_TAB,
    ACTIVATE_TAB,
    DUPLICATE_TAB,
    CLOSE_TAB,
    SEARCH,
    MOVE_TAB_NEXT_TO_CURRENT,
    MOVE_TAB_TO_NEW_WINDOW,
    REOPEN_TAB_IN_PRIVATE_WINDOW,
})


class TabMessenger(ABC):
    """Abstract channel to the tab-management collaborator.

    ``tab_id=None`` in the helpers means "the tab this document lives in";
    the collaborator resolves it.
    """

    @abstractmethod
    def send(self, message_type: str, payload: dict[str, Any]) -> Any:
        """Deliver one message. May raise; callers go through send_quietly."""

    def get_active_tab(self) -> Any:
        return self.send(GET_ACTIVE_TAB, {})

    def get_all_tabs(self, cookie_store_id: str | None = None) -> Any:
        payload = {"cookieStoreId": cookie_store_id} if cookie_store_id else {}
        return self.send(GET_ALL_TABS, payload)

    def get_all_containers(self) -> Any:
        return self.send(GET_ALL_CONTAINERS, {})

    def go_to_tab(self, relative: str | None = None, index: int | None = None) -> Any:
        if (relative is None) == (index is None):
            raise ValueError("go_to_tab needs exactly one of relative or index")
        if relative is not None and relative not in ("previous", "next"):
            raise ValueError(f"Unknown relative tab: {relative!r}")
        payload = {"relative": relative} if relative is not None else {"index": index}
        return self.send(GO_TO_TAB, payload)

    def open_new_tab(
        self,
        url: str | None = None,
        background: bool = False,
        position: str | None = None,
        window: str = "current",
        cookie_store_id: str | None = None,
    ) -> Any:
        payload: dict[str, Any] = {"background": background, "window": window}
        if url is not None:
            payload["url"] = url
        if position is not None:
            payload["position"] = position
        if cookie_store_id is not None:
            payload["cookieStoreId"] = cookie_store_id
        return self.send(OPEN_NEW_TAB, payload)

    def activate_tab(self, tab_id: int | None) -> Any:
        return self.send(ACTIVATE_TAB, {"id": tab_id})

    def duplicate_tab(self, tab_id: int | None = None) -> Any:
        return self.send(DUPLICATE_TAB, {"id": tab_id})

    def close_tab(self, tab_id: int | None = None) -> Any:
        return self.send(CLOSE_TAB, {"id": tab_id})

    def search(self, text: str) -> Any:
        return self.send(SEARCH, {"text": text})

    def move_tab_next_to_current(self, tab_id: int | None) -> Any:
        return self.send(MOVE_TAB_NEXT_TO_CURRENT, {"id": tab_id})

    def move_tab_to_new_window(self, tab_id: int | None = None) -> Any:
        return self.send(MOVE_TAB_TO_NEW_WINDOW, {"id": tab_id})

    def reopen_tab_in_private_window(self, tab_id: int | None = None) -> Any:
        return self.send(REOPEN_TAB_IN_PRIVATE_WINDOW, {"id": tab_id})


class NullMessenger(TabMessenger):
    """Channel for hosts without tabs: every message is dropped."""

    def send(self, message_type: str, payload: dict[str, Any]) -> Any:
        logger.debug("Dropping %s message: no tab channel", message_type)
        return None


def send_quietly(messenger: TabMessenger, method: str, *args: Any, **kwargs: Any) -> bool:
    """Call a messenger helper, logging and swallowing collaborator failures.

    Returns:
        True if the message was handed over without error.
    """
    try:
        getattr(messenger, method)(*args, **kwargs)
    except Exception as exc:
        logger.warning("Tab message %s failed: %s", method, exc)
        return False
    return True
