"""
In-process event bus.

Components that own cached state subscribe to the events that invalidate
it; producers publish without knowing who listens. Delivery is
synchronous, in subscription order. A failing subscriber is logged and
skipped so one bad listener cannot block the others.
"""
from __future__ import annotations

import enum
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class EventType(str, enum.Enum):
    ENTRY_SUBMITTED = "entry_submitted"
    EVALUATION_COMPLETED = "evaluation_completed"
    USER_CHANGED = "user_changed"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    LEVEL_UP = "level_up"


@dataclass(frozen=True)
class Event:
    type: EventType
    user_id: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict)


Subscriber = Callable[[Event], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[EventType, list[Subscriber]] = defaultdict(list)

    def subscribe(self, event_type: EventType, callback: Subscriber) -> None:
        self._subscribers[event_type].append(callback)

    def unsubscribe(self, event_type: EventType, callback: Subscriber) -> None:
        if callback in self._subscribers[event_type]:
            self._subscribers[event_type].remove(callback)

    def publish(self, event: Event) -> int:
        """Deliver to every subscriber; returns how many succeeded."""
        delivered = 0
        for callback in list(self._subscribers[event.type]):
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, event.type.value)
                continue
            delivered += 1
        logger.debug("Published %s to %d subscriber(s)", event.type.value, delivered)
        return delivered
