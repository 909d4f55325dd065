#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test tutorial engine
"""

import sys
import json
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from haloguide.core import GuidanceEventBus, GuidanceEventType
from haloguide.guidance import (
    TutorialEngine, GuidancePersistence, TutorialStatus, default_catalog
)
from haloguide.storage import InMemoryKeyValueStore


class TestTutorialEngine:
    """Test TutorialEngine"""

    def setup_method(self):
        self.store = InMemoryKeyValueStore()
        self.event_bus = GuidanceEventBus()
        self.events = []
        self.event_bus.subscribe(self.events.append)
        self.engine = self._engine()

    def _engine(self):
        persistence = GuidancePersistence(self.store)
        return TutorialEngine(default_catalog(), persistence.hydrate(), persistence,
                              self.event_bus)

    def test_start_sets_first_step(self):
        assert self.engine.start_tutorial("getting-started") is True
        assert self.engine.state.active_tutorial.tutorial_id == "getting-started"
        assert self.engine.state.active_step_index == 0
        assert self.engine.progress() == (1, 4)

    def test_start_unknown_is_noop(self):
        assert self.engine.start_tutorial("no-such-tutorial") is False
        assert self.engine.state.active_tutorial is None
        assert self.engine.progress() == (0, 0)

    def test_prerequisite_gating(self):
        """advanced-features stays locked until getting-started is complete"""
        assert self.engine.missing_prerequisites("advanced-features") == ["getting-started"]
        assert self.engine.can_start("advanced-features") is False
        assert self.engine.start_tutorial("advanced-features") is False
        assert self.engine.state.active_tutorial is None

        self.engine.start_tutorial("getting-started")
        self.engine.complete_tutorial("getting-started")

        assert self.engine.can_start("advanced-features") is True
        assert self.engine.start_tutorial("advanced-features") is True

    def test_step_bounds(self):
        """next stops at the last step, previous stops at the first"""
        self.engine.start_tutorial("daily-practice")

        assert self.engine.previous_step() is False
        assert self.engine.state.active_step_index == 0

        for _ in range(3):
            assert self.engine.next_step() is True
        assert self.engine.is_last_step() is True
        assert self.engine.next_step() is False
        assert self.engine.state.active_step_index == 3
        # Reaching the last step does not complete the tutorial
        assert self.engine.state.active_tutorial is not None
        assert self.engine.is_completed("daily-practice") is False

        assert self.engine.previous_step() is True
        assert self.engine.state.active_step_index == 2

    def test_next_without_active_tutorial(self):
        assert self.engine.next_step() is False
        assert self.engine.previous_step() is False

    def test_restart_resets_step(self):
        self.engine.start_tutorial("getting-started")
        self.engine.next_step()
        self.engine.start_tutorial("getting-started")
        assert self.engine.state.active_step_index == 0

    def test_spotlight_follows_step(self):
        self.engine.start_tutorial("getting-started")
        self.engine.next_step()
        assert self.engine.spotlight_element() == '[data-tutorial="chat-templates"]'

        self.engine.abandon()
        assert self.engine.spotlight_element() is None
        assert self.engine.current_step() is None

    def test_complete_persists_and_clears_active(self):
        self.engine.start_tutorial("values-discovery")
        self.engine.next_step()

        assert self.engine.complete_tutorial("values-discovery") is True
        assert self.engine.state.active_tutorial is None
        assert self.engine.state.active_step_index == 0
        assert json.loads(self.store.get("tutorials.completedIds")) == ["values-discovery"]

        reloaded = self._engine()
        assert reloaded.is_completed("values-discovery")

    def test_complete_is_permissive(self):
        """Completing a tutorial that is not active still records it and closes the active one"""
        self.engine.start_tutorial("daily-practice")

        assert self.engine.complete_tutorial("community-connection") is True
        assert self.engine.is_completed("community-connection")
        assert self.engine.state.active_tutorial is None

        # Completing without ever starting is accepted too
        assert self.engine.complete_tutorial("getting-started") is True
        assert self.engine.state.completed_tutorial_ids == [
            "community-connection", "getting-started"
        ]

    def test_complete_is_idempotent(self):
        self.engine.complete_tutorial("getting-started")
        self.engine.complete_tutorial("getting-started")
        assert self.engine.state.completed_tutorial_ids == ["getting-started"]

        completed = [e for e in self.events if e.event_type == GuidanceEventType.TUTORIAL_COMPLETED]
        assert [e.data["newly_completed"] for e in completed] == [True, False]

    def test_complete_unknown_is_ignored(self):
        assert self.engine.complete_tutorial("no-such-tutorial") is False
        assert self.engine.state.completed_tutorial_ids == []

    def test_abandon_keeps_completed(self):
        self.engine.complete_tutorial("getting-started")
        self.engine.start_tutorial("advanced-features")
        self.engine.next_step()

        assert self.engine.abandon() is True
        assert self.engine.state.active_tutorial is None
        assert self.engine.state.active_step_index == 0
        assert self.engine.state.completed_tutorial_ids == ["getting-started"]
        assert self.engine.abandon() is False

    def test_available_tutorials(self):
        self.engine.complete_tutorial("values-discovery")
        self.engine.start_tutorial("daily-practice")

        statuses = {
            entry.tutorial.tutorial_id: entry.status
            for entry in self.engine.available_tutorials()
        }
        assert statuses == {
            "getting-started": TutorialStatus.AVAILABLE,
            "values-discovery": TutorialStatus.COMPLETED,
            "daily-practice": TutorialStatus.IN_PROGRESS,
            "advanced-features": TutorialStatus.LOCKED,
            "community-connection": TutorialStatus.AVAILABLE,
        }

    def test_reset_progress(self):
        self.engine.complete_tutorial("getting-started")
        self.engine.reset_progress()

        assert self.engine.state.completed_tutorial_ids == []
        assert self.engine.can_start("advanced-features") is False
        assert json.loads(self.store.get("tutorials.completedIds")) == []
