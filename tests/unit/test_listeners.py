"""Tests for the transient listener stack."""

from __future__ import annotations

from quicksilver.core.listeners import ListenerStack


class TestListenerStack:
    """Tests for first-refusal dispatch."""

    def test_most_recent_listener_runs_first(self):
        stack = ListenerStack()
        calls = []
        stack.register_keydown(lambda event: calls.append("first") or True)
        stack.register_keydown(lambda event: calls.append("second") or True)

        assert stack.dispatch_keydown("k") is True
        assert calls == ["second"]

    def test_unconsumed_event_falls_through(self):
        stack = ListenerStack()
        calls = []
        stack.register_keydown(lambda event: calls.append("first") or False)
        stack.register_keydown(lambda event: calls.append("second") or False)

        assert stack.dispatch_keydown("k") is False
        assert calls == ["second", "first"]

    def test_empty_stack(self):
        assert ListenerStack().dispatch_keydown("k") is False

    def test_unregister_is_idempotent(self):
        stack = ListenerStack()
        unregister = stack.register_keydown(lambda event: True)
        unregister()
        unregister()
        assert len(stack) == 0
        assert stack.dispatch_keydown("k") is False

    def test_listener_removing_itself_during_dispatch(self):
        stack = ListenerStack()
        calls = []
        stack.register_keydown(lambda event: calls.append("outer") or False)

        def once(event):
            calls.append("once")
            unregister()
            return False

        unregister = stack.register_keydown(once)

        stack.dispatch_keydown("k")
        stack.dispatch_keydown("k")
        assert calls == ["once", "outer", "outer"]

    def test_listener_removing_another_during_dispatch(self):
        stack = ListenerStack()
        calls = []
        unregister_outer = stack.register_keydown(lambda event: calls.append("outer") or True)

        def remover(event):
            calls.append("remover")
            unregister_outer()
            return False

        stack.register_keydown(remover)

        assert stack.dispatch_keydown("k") is False
        assert calls == ["remover"]

    def test_same_callable_registered_twice(self):
        stack = ListenerStack()
        calls = []

        def listener(event):
            calls.append(event)
            return False

        unregister = stack.register_keydown(listener)
        stack.register_keydown(listener)
        unregister()

        stack.dispatch_keydown("k")
        assert calls == ["k"]

    def test_phases_are_independent(self):
        stack = ListenerStack()
        stack.register_keyup(lambda event: True)
        assert stack.dispatch_keydown("k") is False
        assert stack.dispatch_keyup("k") is True
