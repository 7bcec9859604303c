"""Tests for the tab messaging channel."""

from __future__ import annotations

import pytest

from quicksilver.messaging import NullMessenger, send_quietly
from tests.fakes import RecordingMessenger


class TestTabMessenger:
    """Tests for the message helpers."""

    def test_open_new_tab_payload(self):
        messenger = RecordingMessenger()
        messenger.open_new_tab(url="https://example.com/", background=True, position="after")
        messenger.open_new_tab(window="private", cookie_store_id="firefox-container-1")
        assert messenger.sent == [
            (
                "openNewTab",
                {
                    "background": True,
                    "window": "current",
                    "url": "https://example.com/",
                    "position": "after",
                },
            ),
            (
                "openNewTab",
                {"background": False, "window": "private", "cookieStoreId": "firefox-container-1"},
            ),
        ]

    def test_go_to_tab(self):
        messenger = RecordingMessenger()
        messenger.go_to_tab(relative="previous")
        messenger.go_to_tab(index=3)
        assert messenger.sent == [("goToTab", {"relative": "previous"}), ("goToTab", {"index": 3})]

    @pytest.mark.parametrize(
        "kwargs",
        [{}, {"relative": "next", "index": 1}, {"relative": "sideways"}],
    )
    def test_go_to_tab_arguments(self, kwargs):
        with pytest.raises(ValueError):
            RecordingMessenger().go_to_tab(**kwargs)

    def test_tab_helpers(self):
        messenger = RecordingMessenger()
        messenger.duplicate_tab()
        messenger.close_tab(7)
        messenger.search("quicksilver")
        messenger.get_all_tabs("container-2")
        assert messenger.sent == [
            ("duplicateTab", {"id": None}),
            ("closeTab", {"id": 7}),
            ("search", {"text": "quicksilver"}),
            ("getAllTabs", {"cookieStoreId": "container-2"}),
        ]

    def test_null_messenger(self):
        assert NullMessenger().close_tab() is None


class TestSendQuietly:
    """Tests for send_quietly."""

    def test_success(self):
        messenger = RecordingMessenger()
        assert send_quietly(messenger, "close_tab")
        assert messenger.sent == [("closeTab", {"id": None})]

    def test_failure_is_logged(self, caplog):
        assert not send_quietly(RecordingMessenger(fail=True), "close_tab")
        assert "Tab message close_tab failed: channel closed" in caplog.text

    def test_bad_arguments_are_swallowed(self):
        assert not send_quietly(RecordingMessenger(), "go_to_tab")
