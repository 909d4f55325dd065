#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event Bus Module
Publish/subscribe channel for the guidance signals other UI surfaces react to
"""

import logging
import threading
from typing import Callable, Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class GuidanceEventType(Enum):
    """Guidance signal kinds"""
    # Hint events
    HINT_SHOWN = "hint_shown"
    HINT_HIDDEN = "hint_hidden"
    HINT_DISMISSED = "hint_dismissed"

    # Tutorial events
    TUTORIAL_STARTED = "tutorial_started"
    TUTORIAL_STEP_CHANGED = "tutorial_step_changed"
    TUTORIAL_COMPLETED = "tutorial_completed"
    TUTORIAL_ABANDONED = "tutorial_abandoned"

    # Onboarding events
    ONBOARDING_STEP_CHANGED = "onboarding_step_changed"
    ONBOARDING_VALUES_CHANGED = "onboarding_values_changed"
    ONBOARDING_FINISHED = "onboarding_finished"
    ONBOARDING_SKIPPED = "onboarding_skipped"
    ONBOARDING_RESTARTED = "onboarding_restarted"

    # Persistence events
    STORAGE_DEGRADED = "storage_degraded"


@dataclass
class GuidanceEvent:
    """A published guidance signal"""
    event_type: GuidanceEventType
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = "unknown"  # Engine that published the event

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source
        }


@dataclass
class EventSubscriber:
    """Registered callback with its type filter"""
    subscriber_id: str
    callback: Callable[[GuidanceEvent], None]
    event_types: Optional[List[GuidanceEventType]] = None  # None receives everything
    priority: int = 0

    def wants(self, event: GuidanceEvent) -> bool:
        return self.event_types is None or event.event_type in self.event_types


class GuidanceEventBus:
    """
    Synchronous event bus

    ``publish`` calls every matching subscriber on the caller's thread,
    highest priority first. A subscriber that raises is logged and skipped;
    the publisher never sees the error.
    """

    def __init__(self):
        self.logger = logging.getLogger('haloguide.event_bus')
        self._subscribers: List[EventSubscriber] = []
        self._lock = threading.Lock()
        self._next_id = 0

    @property
    def subscribers(self) -> List[EventSubscriber]:
        with self._lock:
            return list(self._subscribers)

    def subscribe(self,
                  callback: Callable[[GuidanceEvent], None],
                  subscriber_id: Optional[str] = None,
                  event_types: Optional[List[GuidanceEventType]] = None,
                  priority: int = 0) -> str:
        """
        Register a callback

        Args:
            callback: Called with each matching GuidanceEvent
            subscriber_id: Explicit id, generated when omitted
            event_types: Types to receive, None for all
            priority: Higher priorities are called first

        Returns:
            str: Subscriber id for ``unsubscribe``
        """
        with self._lock:
            if subscriber_id is None:
                self._next_id += 1
                subscriber_id = f"subscriber-{self._next_id}"
            self._subscribers.append(
                EventSubscriber(subscriber_id, callback, event_types, priority)
            )
            # Stable sort keeps registration order within a priority
            self._subscribers.sort(key=lambda s: s.priority, reverse=True)

        self.logger.debug(f"Subscribed {subscriber_id}")
        return subscriber_id

    def unsubscribe(self, subscriber_id: str) -> bool:
        with self._lock:
            remaining = [s for s in self._subscribers if s.subscriber_id != subscriber_id]
            removed = len(remaining) != len(self._subscribers)
            self._subscribers = remaining

        if not removed:
            self.logger.warning(f"Unknown subscriber: {subscriber_id}")
        return removed

    def publish(self,
                event_type: GuidanceEventType,
                data: Optional[Dict[str, Any]] = None,
                source: str = "unknown") -> GuidanceEvent:
        """
        Deliver an event to every matching subscriber

        Args:
            event_type: Event type
            data: Event payload
            source: Publishing component

        Returns:
            GuidanceEvent: The delivered event
        """
        event = GuidanceEvent(event_type=event_type, data=data or {}, source=source)
        self.logger.debug(f"Publishing {event_type.value} from {source}")

        for subscriber in self.subscribers:
            if not subscriber.wants(event):
                continue
            try:
                subscriber.callback(event)
            except Exception as e:
                self.logger.error(
                    f"Subscriber {subscriber.subscriber_id} failed on {event_type.value}: {e}"
                )
        return event
