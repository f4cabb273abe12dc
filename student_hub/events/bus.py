"""
Notification event bus

Synchronous publish/subscribe by topic name. The presentation layer subscribes
to render celebrations; the core only publishes.

Delivery:
- Subscription order
- Inline with the publishing operation
- Best-effort: nothing is queued for late subscribers
- A raising subscriber is logged and skipped, the rest still receive the event
"""

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, Union

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    """Topics published by the core"""
    # Session lifecycle
    LOGIN = "login"
    SIGNUP = "signup"
    LOGOUT = "logout"
    PROFILE_UPDATED = "profile-updated"
    TIER_UPGRADED = "tier-upgraded"
    ACCOUNT_DELETED = "account-deleted"

    # Progression
    POINTS_AWARDED = "points-awarded"
    LEVEL_UP = "level-up"
    ACHIEVEMENT_UNLOCKED = "achievement-unlocked"
    STREAK_UPDATED = "streak-updated"


TopicLike = Union[Topic, str]
Subscriber = Callable[[Any], Any]


def _name(topic: TopicLike) -> str:
    return topic.value if isinstance(topic, Topic) else topic


class EventBus:
    """In-process topic broadcaster"""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)

    def subscribe(self, topic: TopicLike, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a topic.

        Args:
            topic: Topic name
            callback: Called with the event payload

        Returns:
            Function that removes this subscription

        Example:
            unsubscribe = bus.subscribe(Topic.LEVEL_UP, lambda p: print(p["level"]))
            ...
            unsubscribe()
        """
        name = _name(topic)
        self._subscribers[name].append(callback)
        logger.debug(f"Subscribed {getattr(callback, '__name__', callback)!r} to '{name}'")

        def unsubscribe() -> None:
            self.unsubscribe(name, callback)

        return unsubscribe

    def unsubscribe(self, topic: TopicLike, callback: Subscriber) -> bool:
        """Remove one registration of callback; False if it was not subscribed"""
        callbacks = self._subscribers.get(_name(topic), [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def publish(self, topic: TopicLike, payload: Any = None) -> int:
        """
        Deliver payload to the topic's current subscribers.

        Returns:
            Number of subscribers that handled the event without raising
        """
        name = _name(topic)
        # Copy so callbacks can (un)subscribe while we iterate
        callbacks = list(self._subscribers.get(name, []))
        delivered = 0

        for callback in callbacks:
            try:
                callback(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"Subscriber for '{name}' failed: {e}", exc_info=True)

        logger.debug(f"Published '{name}' to {delivered}/{len(callbacks)} subscribers")
        return delivered

    def subscriber_count(self, topic: TopicLike) -> int:
        return len(self._subscribers.get(_name(topic), []))

    def clear(self) -> None:
        """Drop every subscription"""
        self._subscribers.clear()
