"""
Tests for the in-process event bus
"""
from core.events import EventBus, EVENT_PROFILE_CREATED


def test_handlers_called_in_registration_order():
    bus = EventBus()
    calls = []
    bus.subscribe(EVENT_PROFILE_CREATED, lambda **kw: calls.append(("first", kw["user_id"])))
    bus.subscribe(EVENT_PROFILE_CREATED, lambda **kw: calls.append(("second", kw["user_id"])))

    bus.emit(EVENT_PROFILE_CREATED, user_id="u1")

    assert calls == [("first", "u1"), ("second", "u1")]


def test_emit_without_subscribers_is_noop():
    EventBus().emit("nothing.listens")


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    calls = []

    def broken(**_):
        raise RuntimeError("boom")

    bus.subscribe(EVENT_PROFILE_CREATED, broken)
    bus.subscribe(EVENT_PROFILE_CREATED, lambda **kw: calls.append(kw))

    bus.emit(EVENT_PROFILE_CREATED, user_id="u1")

    assert calls == [{"user_id": "u1"}]


def test_buses_are_independent():
    first, second = EventBus(), EventBus()
    first.subscribe(EVENT_PROFILE_CREATED, lambda **_: None)

    assert first.handler_count(EVENT_PROFILE_CREATED) == 1
    assert second.handler_count(EVENT_PROFILE_CREATED) == 0


def test_clear():
    bus = EventBus()
    bus.subscribe(EVENT_PROFILE_CREATED, lambda **_: None)
    bus.clear()
    assert bus.handler_count(EVENT_PROFILE_CREATED) == 0
