import logging

from widgetkit.services.event_bus import ChartEvent, EventBus


def test_subscribe_publish_basic():
    bus = EventBus()
    received = []

    def handler(evt):
        received.append((evt.name, evt.payload))

    bus.subscribe(ChartEvent.DATA_POINT_SELECT, handler)
    bus.publish(ChartEvent.DATA_POINT_SELECT, {"index": 1})
    assert received == [(ChartEvent.DATA_POINT_SELECT.value, {"index": 1})]


def test_string_and_enum_names_share_channel():
    bus = EventBus()
    received = []
    bus.subscribe("selectionCleared", lambda evt: received.append(evt.name))
    bus.publish(ChartEvent.SELECTION_CLEARED)
    assert received == ["selectionCleared"]


def test_once_subscription():
    bus = EventBus()
    count = 0

    def incr(_):
        nonlocal count
        count += 1

    sub = bus.subscribe(ChartEvent.ANIMATION_COMPLETE, incr, once=True)
    bus.publish(ChartEvent.ANIMATION_COMPLETE)
    bus.publish(ChartEvent.ANIMATION_COMPLETE)
    assert count == 1  # second publish ignored
    assert not sub.active


def test_failing_listener_is_logged_and_isolated(caplog):
    bus = EventBus()
    order = []

    def bad(_):
        order.append("bad")
        raise RuntimeError("boom")

    def good(_):
        order.append("good")

    bus.subscribe("custom", bad)
    bus.subscribe("custom", good)
    with caplog.at_level(logging.ERROR, logger="widgetkit.services.event_bus"):
        bus.publish("custom", 123)
    # Both handlers executed despite error
    assert order == ["bad", "good"]
    assert len(bus.failures) == 1
    assert isinstance(bus.failures[0][1], RuntimeError)
    assert any("Listener for custom failed" in r.getMessage() for r in caplog.records)


def test_failures_are_bounded():
    bus = EventBus(failure_capacity=2)

    def bad(_):
        raise ValueError("nope")

    bus.subscribe("x", bad)
    for payload in range(5):
        bus.publish("x", payload)
    assert [evt.payload for evt, _ in bus.failures] == [3, 4]


def test_cancel_detaches_from_bus():
    bus = EventBus()
    calls = []
    sub_a = bus.subscribe("x", lambda evt: calls.append("a"))
    sub_b = bus.subscribe("x", lambda evt: calls.append("b"))
    sub_a.cancel()
    bus.publish("x")
    bus.unsubscribe(sub_b)
    bus.publish("x")
    assert calls == ["b"]
    assert not sub_a.active and not sub_b.active
    # cancelling twice is harmless
    sub_a.cancel()


def test_listener_cancelled_mid_dispatch_is_skipped():
    bus = EventBus()
    calls = []
    holder = {}

    def first(evt):
        calls.append("first")
        holder["second"].cancel()

    bus.subscribe("tick", first)
    holder["second"] = bus.subscribe("tick", lambda evt: calls.append("second"))
    bus.publish("tick")
    assert calls == ["first"]


def test_handler_may_unsubscribe_itself():
    bus = EventBus()
    calls = []
    holder = {}

    def once_manual(evt):
        calls.append(evt.payload)
        bus.unsubscribe(holder["sub"])

    holder["sub"] = bus.subscribe("tick", once_manual)
    bus.publish("tick", 1)
    bus.publish("tick", 2)
    assert calls == [1]


def test_clear_removes_everything():
    bus = EventBus()
    calls = []
    sub = bus.subscribe("x", lambda evt: calls.append(evt))
    bus.subscribe("y", lambda evt: 1 / 0)
    bus.publish("y")
    bus.clear()
    bus.publish("x")
    assert calls == []
    assert not sub.active
    assert bus.failures == []
