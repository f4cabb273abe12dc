"""Unit tests for the notification event bus (student_hub/events/bus.py)"""
from unittest.mock import Mock

from student_hub.events.bus import EventBus, Topic


def test_publish_delivers_payload(bus, subscriber):
    bus.subscribe(Topic.LEVEL_UP, subscriber)

    delivered = bus.publish(Topic.LEVEL_UP, {"level": 2})

    assert delivered == 1
    subscriber.assert_called_once_with({"level": 2})


def test_topic_string_and_enum_are_equivalent(bus, subscriber):
    bus.subscribe("level-up", subscriber)
    bus.publish(Topic.LEVEL_UP, {"level": 3})
    subscriber.assert_called_once_with({"level": 3})


def test_publish_without_subscribers(bus):
    assert bus.publish(Topic.LOGOUT) == 0


def test_subscription_order(bus):
    calls = []
    bus.subscribe(Topic.LOGIN, lambda p: calls.append("first"))
    bus.subscribe(Topic.LOGIN, lambda p: calls.append("second"))

    bus.publish(Topic.LOGIN, {})

    assert calls == ["first", "second"]


def test_other_topics_not_notified(bus, subscriber):
    bus.subscribe(Topic.LOGIN, subscriber)
    bus.publish(Topic.LOGOUT, {})
    subscriber.assert_not_called()


def test_unsubscribe_function(bus, subscriber):
    unsubscribe = bus.subscribe(Topic.SIGNUP, subscriber)
    unsubscribe()

    bus.publish(Topic.SIGNUP, {})

    subscriber.assert_not_called()
    assert bus.subscriber_count(Topic.SIGNUP) == 0


def test_unsubscribe_unknown_callback(bus, subscriber):
    assert bus.unsubscribe(Topic.SIGNUP, subscriber) is False


def test_failing_subscriber_is_isolated(bus, caplog):
    """Test a raising subscriber does not stop later subscribers"""
    failing = Mock(side_effect=RuntimeError("render failed"))
    healthy = Mock()
    bus.subscribe(Topic.ACHIEVEMENT_UNLOCKED, failing)
    bus.subscribe(Topic.ACHIEVEMENT_UNLOCKED, healthy)

    delivered = bus.publish(Topic.ACHIEVEMENT_UNLOCKED, {"id": "first_steps"})

    assert delivered == 1
    healthy.assert_called_once_with({"id": "first_steps"})
    assert "render failed" in caplog.text


def test_subscribe_during_publish_takes_effect_next_time(bus):
    late = Mock()
    bus.subscribe(Topic.LOGIN, lambda p: bus.subscribe(Topic.LOGIN, late))

    bus.publish(Topic.LOGIN, {})
    late.assert_not_called()

    bus.publish(Topic.LOGIN, {})
    late.assert_called_once()


def test_clear(bus, subscriber):
    bus.subscribe(Topic.LOGIN, subscriber)
    bus.clear()
    assert bus.subscriber_count(Topic.LOGIN) == 0


def test_separate_buses_are_independent(subscriber):
    first, second = EventBus(), EventBus()
    first.subscribe(Topic.LOGIN, subscriber)

    second.publish(Topic.LOGIN, {})

    subscriber.assert_not_called()
