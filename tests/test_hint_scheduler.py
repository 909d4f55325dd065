#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test hint trigger schedulers and the guidance event bus
"""

import sys
import threading
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from haloguide.core import (
    ManualHintScheduler, ThreadingHintScheduler, TaskState,
    GuidanceEventBus, GuidanceEventType
)


class TestManualHintScheduler:
    """Test virtual-clock scheduler"""

    def setup_method(self):
        self.scheduler = ManualHintScheduler()
        self.calls = []

    def test_fires_only_when_due(self):
        """A task fires once the clock reaches its due time"""
        task = self.scheduler.schedule(1.0, lambda: self.calls.append("a"), name="a")

        assert self.scheduler.advance(0.5) == 0
        assert self.calls == []
        assert task.pending

        assert self.scheduler.advance(0.5) == 1
        assert self.calls == ["a"]
        assert task.state == TaskState.FIRED
        assert self.scheduler.now == 1.0

    def test_fires_in_due_order(self):
        self.scheduler.schedule(2.0, lambda: self.calls.append("late"))
        self.scheduler.schedule(1.0, lambda: self.calls.append("early"))

        assert self.scheduler.advance(5) == 2
        assert self.calls == ["early", "late"]

    def test_cancelled_task_never_fires(self):
        """Cancel returns True once and the callback never runs"""
        task = self.scheduler.schedule(1.0, lambda: self.calls.append("a"))

        assert task.cancel() is True
        assert task.cancel() is False
        assert self.scheduler.pending_tasks() == []
        assert self.scheduler.advance(2.0) == 0
        assert self.calls == []
        assert task.cancelled

    def test_cancel_after_fire_is_noop(self):
        task = self.scheduler.schedule(0.0, lambda: self.calls.append("a"))
        self.scheduler.advance(0)
        assert task.cancel() is False
        assert task.state == TaskState.FIRED

    def test_failing_callback_is_contained(self):
        """A callback exception does not stop later tasks"""
        def boom():
            raise RuntimeError("boom")

        self.scheduler.schedule(1.0, boom)
        self.scheduler.schedule(1.0, lambda: self.calls.append("after"))

        assert self.scheduler.advance(1.0) == 2
        assert self.calls == ["after"]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            self.scheduler.schedule(-1, lambda: None)
        with pytest.raises(ValueError):
            self.scheduler.advance(-1)

    def test_shutdown_cancels_pending(self):
        self.scheduler.schedule(1.0, lambda: self.calls.append("a"))
        self.scheduler.schedule(2.0, lambda: self.calls.append("b"))

        assert self.scheduler.cancel_all() == 2
        self.scheduler.advance(5)
        assert self.calls == []


class TestThreadingHintScheduler:
    """Test timer-thread scheduler"""

    def setup_method(self):
        self.scheduler = ThreadingHintScheduler()

    def teardown_method(self):
        self.scheduler.shutdown()

    def test_callback_runs_after_delay(self):
        fired = threading.Event()
        task = self.scheduler.schedule(0.01, fired.set, name="quick")

        assert fired.wait(timeout=5.0)
        assert task.state == TaskState.FIRED
        assert self.scheduler.pending_tasks() == []

    def test_cancelled_timer_does_not_fire(self):
        fired = threading.Event()
        task = self.scheduler.schedule(0.2, fired.set)

        assert task.cancel() is True
        assert not fired.wait(timeout=0.5)
        assert task.cancelled


class TestGuidanceEventBus:
    """Test synchronous event bus"""

    def setup_method(self):
        self.bus = GuidanceEventBus()
        self.received = []

    def test_publish_reaches_matching_subscribers(self):
        """Subscribers only receive the event types they asked for"""
        self.bus.subscribe(self.received.append,
                           event_types=[GuidanceEventType.HINT_SHOWN])
        self.bus.publish(GuidanceEventType.HINT_SHOWN, {"hint_id": "welcome-hint"})
        self.bus.publish(GuidanceEventType.HINT_DISMISSED, {"hint_id": "welcome-hint"})

        assert len(self.received) == 1
        assert self.received[0].data == {"hint_id": "welcome-hint"}
        assert self.received[0].to_dict()["event_type"] == "hint_shown"

    def test_priority_order(self):
        order = []
        self.bus.subscribe(lambda e: order.append("low"), priority=0)
        self.bus.subscribe(lambda e: order.append("high"), priority=10)
        self.bus.publish(GuidanceEventType.TUTORIAL_STARTED)

        assert order == ["high", "low"]

    def test_failing_subscriber_is_isolated(self):
        """A raising subscriber never stops delivery to the others"""
        def broken(event):
            raise RuntimeError("broken")

        self.bus.subscribe(broken, priority=5)
        self.bus.subscribe(self.received.append)
        self.bus.publish(GuidanceEventType.ONBOARDING_FINISHED)
        event = self.bus.publish(GuidanceEventType.ONBOARDING_SKIPPED)

        assert [e.event_type for e in self.received] == [
            GuidanceEventType.ONBOARDING_FINISHED, GuidanceEventType.ONBOARDING_SKIPPED
        ]
        assert event.source == "unknown"

    def test_unsubscribe(self):
        subscriber_id = self.bus.subscribe(self.received.append)

        assert subscriber_id == "subscriber-1"
        assert self.bus.unsubscribe(subscriber_id) is True
        assert self.bus.unsubscribe(subscriber_id) is False

        self.bus.publish(GuidanceEventType.HINT_HIDDEN)
        assert self.received == []
