#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test hint catalog and hint engine
"""

import sys
import json
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from haloguide.core import GuidanceEventBus, GuidanceEventType
from haloguide.guidance import (
    HintCatalog, HintEngine, GuidancePersistence, GuidanceState,
    Hint, HintPriority, Tutorial, TutorialStep, TutorialCategory, default_catalog
)
from haloguide.storage import InMemoryKeyValueStore


def _hint(hint_id, route="/dashboard", priority=HintPriority.MEDIUM):
    return Hint(hint_id=hint_id, title=hint_id, body="", route=route, priority=priority)


def _engine(catalog=None, store=None, event_bus=None):
    store = store if store is not None else InMemoryKeyValueStore()
    persistence = GuidancePersistence(store)
    state = persistence.hydrate()
    return HintEngine(catalog or default_catalog(), state, persistence, event_bus), store


class TestHintCatalog:
    """Test HintCatalog"""

    def test_default_catalog_routes(self):
        catalog = default_catalog()
        assert catalog.routes() == ["/dashboard", "/chat", "/goals", "/journal"]
        assert [h.hint_id for h in catalog.hints_for_route("/Dashboard/")] == [
            "welcome-hint", "dashboard-halo", "dashboard-insights"
        ]

    def test_root_hints_follow_custom_default_route(self):
        """Hints declared on the root resolve to whichever default route is in use"""
        catalog = HintCatalog(hints=[_hint("root", route="/"), _hint("dash")])

        assert catalog.routes("/home") == ["/home", "/dashboard"]
        assert [h.hint_id for h in catalog.hints_for_route("/", "/home")] == ["root"]
        assert [h.hint_id for h in catalog.hints_for_route("/home", "/home")] == ["root"]
        assert [h.hint_id for h in catalog.hints_for_route("/dashboard", "/home")] == ["dash"]

        store = InMemoryKeyValueStore()
        persistence = GuidancePersistence(store)
        engine = HintEngine(catalog, persistence.hydrate(), persistence, default_route="/home")
        assert engine.select_hint_for_route("/").hint_id == "root"

    def test_duplicate_hint_rejected(self):
        with pytest.raises(ValueError):
            HintCatalog(hints=[_hint("a"), _hint("a")])

    def test_unknown_prerequisite_rejected(self):
        step = TutorialStep(title="t", body="b")
        with pytest.raises(ValueError):
            HintCatalog(tutorials=[Tutorial(
                tutorial_id="x", title="x", description="", category=TutorialCategory.FEATURE,
                steps=(step,), prerequisites=("missing",)
            )])

    def test_tutorial_without_steps_rejected(self):
        with pytest.raises(ValueError):
            Tutorial(tutorial_id="x", title="x", description="",
                     category=TutorialCategory.FEATURE, steps=())


class TestHintEngine:
    """Test HintEngine"""

    def setup_method(self):
        self.event_bus = GuidanceEventBus()
        self.events = []
        self.event_bus.subscribe(self.events.append)
        self.engine, self.store = _engine(event_bus=self.event_bus)

    def test_show_and_hide(self):
        """Hide clears the active hint without dismissing it"""
        assert self.engine.show_hint("dashboard-halo") is True
        assert self.engine.state.active_hint.hint_id == "dashboard-halo"

        assert self.engine.hide_hint() is True
        assert self.engine.state.active_hint is None
        assert self.engine.state.dismissed_hint_ids == []
        assert self.engine.hide_hint() is False

        assert self.engine.show_hint("dashboard-halo") is True

    def test_show_unknown_is_noop(self):
        assert self.engine.show_hint("no-such-hint") is False
        assert self.engine.state.active_hint is None

    def test_dismissed_hint_never_shows_again(self):
        """Dismissal is permanent for the profile, including after reload"""
        self.engine.show_hint("welcome-hint")
        assert self.engine.dismiss_hint("welcome-hint") is True
        assert self.engine.state.active_hint is None

        assert self.engine.show_hint("welcome-hint") is False
        assert self.engine.select_hint_for_route("/dashboard").hint_id != "welcome-hint"

        reloaded, _ = _engine(store=self.store)
        assert reloaded.show_hint("welcome-hint") is False
        assert reloaded.state.dismissed_hint_ids == ["welcome-hint"]

    def test_dismiss_is_idempotent(self):
        """Dismissing twice changes nothing the second time"""
        assert self.engine.dismiss_hint("chat-memory") is True
        assert self.engine.dismiss_hint("chat-memory") is False

        assert self.engine.state.dismissed_hint_ids == ["chat-memory"]
        assert json.loads(self.store.get("hints.dismissedIds")) == ["chat-memory"]
        dismissed = [e for e in self.events if e.event_type == GuidanceEventType.HINT_DISMISSED]
        assert len(dismissed) == 1

    def test_dismiss_other_hint_keeps_active(self):
        self.engine.show_hint("dashboard-halo")
        self.engine.dismiss_hint("chat-memory")
        assert self.engine.state.active_hint.hint_id == "dashboard-halo"

    def test_dismiss_unknown_id_is_recorded(self):
        assert self.engine.dismiss_hint("retired-hint") is True
        assert "retired-hint" in self.engine.state.dismissed_hint_ids

    def test_priority_tie_break(self):
        """First high in catalog order wins, else first remaining"""
        catalog = HintCatalog(hints=[
            _hint("low-1", priority=HintPriority.LOW),
            _hint("high-1", priority=HintPriority.HIGH),
            _hint("medium-1"),
            _hint("high-2", priority=HintPriority.HIGH),
            _hint("elsewhere", route="/chat", priority=HintPriority.HIGH),
        ])
        engine, _ = _engine(catalog=catalog)

        assert engine.select_hint_for_route("/dashboard").hint_id == "high-1"
        engine.dismiss_hint("high-1")
        assert engine.select_hint_for_route("/dashboard").hint_id == "high-2"
        engine.dismiss_hint("high-2")
        assert engine.select_hint_for_route("/dashboard").hint_id == "low-1"

    def test_no_candidates(self):
        assert self.engine.select_hint_for_route("/settings") is None

    def test_dashboard_walkthrough(self):
        """Dismissing dashboard hints in turn surfaces the next, then nothing"""
        expected = ["welcome-hint", "dashboard-halo", "dashboard-insights"]
        for hint_id in expected:
            hint = self.engine.select_hint_for_route("/dashboard")
            assert hint.hint_id == hint_id
            assert self.engine.show_hint(hint.hint_id)
            self.engine.dismiss_hint(hint.hint_id)

        assert self.engine.select_hint_for_route("/dashboard") is None
        assert self.engine.state.dismissed_hint_ids == expected

    def test_hints_for_route_and_reset(self):
        self.engine.dismiss_hint("chat-templates")
        assert [h.hint_id for h in self.engine.hints_for_route("/chat")] == ["chat-memory"]

        self.engine.reset_dismissals()
        assert [h.hint_id for h in self.engine.hints_for_route("/chat")] == [
            "chat-templates", "chat-memory"
        ]
        assert json.loads(self.store.get("hints.dismissedIds")) == []

    def test_corrupt_dismissed_value_reads_as_empty(self):
        store = InMemoryKeyValueStore({"hints.dismissedIds": "{oops"})
        engine, _ = _engine(store=store)
        assert engine.state.dismissed_hint_ids == []
        assert engine.show_hint("welcome-hint") is True

    def test_events_published(self):
        self.engine.show_hint("journal-prompts")
        self.engine.hide_hint()
        types = [e.event_type for e in self.events]
        assert types == [GuidanceEventType.HINT_SHOWN, GuidanceEventType.HINT_HIDDEN]
        assert self.events[0].data == {"hint_id": "journal-prompts", "route": "/journal"}
