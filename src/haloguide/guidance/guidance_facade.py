#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Guidance Facade
Single entry point that composes the hint, tutorial and onboarding engines
over one shared state and one persistent store
"""

import copy
import functools
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .catalog import HintCatalog, default_catalog
from .hint_engine import HintEngine
from .models import (
    Hint, Tutorial, TutorialStep, TutorialAvailability, OnboardingStep, GuidanceState
)
from .onboarding_wizard import OnboardingWizard
from .persistence import GuidancePersistence
from .tutorial_engine import TutorialEngine
from ..core.event_bus import GuidanceEventBus, GuidanceEvent, GuidanceEventType
from ..core.hint_scheduler import HintTriggerScheduler, ThreadingHintScheduler, ScheduledTask
from ..storage import PersistentKeyValueStore, create_store
from ..utils.config import Config
from ..utils.helpers import normalize_route


def _guarded(default: Any = None):
    """Serialise a facade call and absorb any exception it raises"""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            with self._lock:
                try:
                    return method(self, *args, **kwargs)
                except Exception as e:
                    self.logger.error(f"Guidance operation {method.__name__} failed: {e}",
                                      exc_info=True)
                    return copy.copy(default)
        return wrapper
    return decorator


class GuidanceFacade:
    """
    Guided-experience entry point for UI surfaces

    One instance per session, constructed explicitly and passed to whatever
    needs it. No method raises: failures degrade to guidance not appearing
    or not persisting.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 store: Optional[PersistentKeyValueStore] = None,
                 catalog: Optional[HintCatalog] = None,
                 scheduler: Optional[HintTriggerScheduler] = None,
                 event_bus: Optional[GuidanceEventBus] = None,
                 on_onboarding_complete: Optional[Callable[[bool], None]] = None):
        """
        Initialize guidance facade and hydrate state from the store

        Args:
            config: Configuration object, defaults loaded without writing a file
            store: Persistent store, defaults to the configured backend
            catalog: Hint/tutorial catalog, defaults to the product catalog
            scheduler: Hint trigger scheduler, defaults to a threading scheduler
            event_bus: Event bus for outbound signals
            on_onboarding_complete: Called with ``skipped`` when onboarding ends
        """
        self.logger = logging.getLogger('haloguide.guidance_facade')
        self._lock = threading.RLock()

        self.config = config or Config(create_default=False)
        self.catalog = catalog or default_catalog()
        self.event_bus = event_bus or GuidanceEventBus()

        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or ThreadingHintScheduler()

        self.store = store if store is not None else create_store(self.config)
        self.persistence = GuidancePersistence(self.store, on_degraded=self._on_storage_degraded)
        self.state: GuidanceState = self.persistence.hydrate()

        self.hints = HintEngine(
            self.catalog, self.state, self.persistence, self.event_bus,
            default_route=self.config.hints.default_route
        )
        self.tutorials = TutorialEngine(self.catalog, self.state, self.persistence, self.event_bus)
        self.onboarding = OnboardingWizard(
            self.state, self.persistence, self.event_bus, on_complete=on_onboarding_complete
        )

        self._current_route: Optional[str] = None
        self._pending_trigger: Optional[ScheduledTask] = None
        # Bumped on every navigation; a trigger only acts for its own generation
        self._trigger_generation = 0

        self.logger.info(
            f"Guidance facade initialized ({len(self.catalog.hints)} hints, "
            f"{len(self.catalog.tutorials)} tutorials)"
        )

    def _on_storage_degraded(self, operation: str, key: str):
        self.event_bus.publish(
            GuidanceEventType.STORAGE_DEGRADED,
            {'operation': operation, 'key': key},
            source='guidance_facade'
        )

    # ==================== Read-only accessors ====================

    @property
    def active_hint(self) -> Optional[Hint]:
        return self.state.active_hint

    @property
    def active_tutorial(self) -> Optional[Tutorial]:
        return self.state.active_tutorial

    @property
    def active_step_index(self) -> int:
        return self.state.active_step_index

    @property
    def dismissed_hint_ids(self) -> Tuple[str, ...]:
        return tuple(self.state.dismissed_hint_ids)

    @property
    def completed_tutorial_ids(self) -> Tuple[str, ...]:
        return tuple(self.state.completed_tutorial_ids)

    @property
    def onboarding_step_index(self) -> int:
        return self.state.onboarding_step_index

    @property
    def onboarding_selected_values(self) -> Tuple[str, ...]:
        return tuple(self.state.onboarding_selected_values)

    @property
    def current_route(self) -> Optional[str]:
        return self._current_route

    @property
    def pending_trigger(self) -> Optional[ScheduledTask]:
        return self._pending_trigger

    # ==================== Hints ====================

    @_guarded(False)
    def show_hint(self, hint_id: str) -> bool:
        return self.hints.show_hint(hint_id)

    @_guarded(False)
    def hide_hint(self) -> bool:
        return self.hints.hide_hint()

    @_guarded(False)
    def dismiss_hint(self, hint_id: str) -> bool:
        return self.hints.dismiss_hint(hint_id)

    @_guarded(None)
    def select_hint_for_route(self, route: str) -> Optional[Hint]:
        return self.hints.select_hint_for_route(self._normalize(route))

    @_guarded([])
    def hints_for_route(self, route: Optional[str] = None) -> List[Hint]:
        """Eligible hints for ``route`` (defaults to the current route)"""
        route = route if route is not None else self._current_route
        return self.hints.hints_for_route(self._normalize(route))

    @_guarded(False)
    def reset_dismissed_hints(self) -> bool:
        self.hints.reset_dismissals()
        return True

    # ==================== Route trigger ====================

    def _normalize(self, route: Optional[str]) -> str:
        return normalize_route(route, self.config.hints.default_route)

    @_guarded(None)
    def on_navigate(self, route: str) -> Optional[ScheduledTask]:
        """
        Inbound navigation signal from the host router

        Cancels any pending hint trigger, hides a hint that belongs to another
        route, then schedules a new trigger after the settle delay.

        Args:
            route: New route or URL

        Returns:
            Optional[ScheduledTask]: The pending trigger, None if auto trigger is off
        """
        route = self._normalize(route)
        self._current_route = route
        self._cancel_pending_trigger()
        self._trigger_generation += 1
        generation = self._trigger_generation

        active = self.state.active_hint
        if active is not None and self._normalize(active.route) != route:
            self.hints.hide_hint()

        if not self.config.hints.auto_trigger:
            return None

        task = self.scheduler.schedule(
            self.config.hints.settle_delay_seconds,
            lambda: self._on_route_settled(route, generation),
            name=f"hint-trigger:{route}"
        )
        self._pending_trigger = task
        return task

    def _cancel_pending_trigger(self):
        if self._pending_trigger is not None:
            if self._pending_trigger.cancel():
                self.logger.debug(f"Cancelled stale hint trigger {self._pending_trigger.name}")
            self._pending_trigger = None

    @_guarded(None)
    def _on_route_settled(self, route: str, generation: int) -> Optional[Hint]:
        """Settle-delay callback: surface the best hint if the route is still current"""
        if generation != self._trigger_generation:
            self.logger.debug(f"Trigger for {route} superseded by a newer navigation")
            return None
        if route != self._current_route:
            self.logger.debug(f"Route {route} no longer current, skipping hint")
            return None
        self._pending_trigger = None

        if self.state.active_tutorial is not None:
            self.logger.debug("Tutorial in progress, not stacking a hint on top")
            return None

        hint = self.hints.select_hint_for_route(route)
        if hint is None:
            return None
        if self.state.active_hint is not None and self.state.active_hint.hint_id == hint.hint_id:
            return hint
        return hint if self.hints.show_hint(hint.hint_id) else None

    # ==================== Tutorials ====================

    @_guarded(False)
    def start_tutorial(self, tutorial_id: str) -> bool:
        return self.tutorials.start_tutorial(tutorial_id)

    @_guarded(False)
    def next_step(self) -> bool:
        return self.tutorials.next_step()

    @_guarded(False)
    def previous_step(self) -> bool:
        return self.tutorials.previous_step()

    @_guarded(False)
    def complete_tutorial(self, tutorial_id: str) -> bool:
        return self.tutorials.complete_tutorial(tutorial_id)

    @_guarded(False)
    def abandon_tutorial(self) -> bool:
        return self.tutorials.abandon()

    @_guarded(False)
    def can_start_tutorial(self, tutorial_id: str) -> bool:
        return self.tutorials.can_start(tutorial_id)

    @_guarded([])
    def available_tutorials(self) -> List[TutorialAvailability]:
        return self.tutorials.available_tutorials()

    @_guarded(None)
    def current_tutorial_step(self) -> Optional[TutorialStep]:
        return self.tutorials.current_step()

    @_guarded(None)
    def spotlight_element(self) -> Optional[str]:
        return self.tutorials.spotlight_element()

    @_guarded((0, 0))
    def tutorial_progress(self) -> Tuple[int, int]:
        return self.tutorials.progress()

    @_guarded(False)
    def reset_completed_tutorials(self) -> bool:
        self.tutorials.reset_progress()
        return True

    # ==================== Onboarding ====================

    @_guarded(False)
    def onboarding_next(self) -> bool:
        return self.onboarding.next()

    @_guarded(False)
    def onboarding_previous(self) -> bool:
        return self.onboarding.previous()

    @_guarded(False)
    def toggle_value(self, tag: str) -> bool:
        return self.onboarding.toggle_value(tag)

    @_guarded(False)
    def finish_onboarding(self) -> bool:
        return self.onboarding.finish()

    @_guarded(False)
    def skip_onboarding(self) -> bool:
        return self.onboarding.skip()

    @_guarded(False)
    def restart_onboarding(self) -> bool:
        return self.onboarding.restart()

    @_guarded(False)
    def onboarding_can_proceed(self) -> bool:
        return self.onboarding.can_proceed()

    @_guarded(False)
    def should_run_onboarding(self) -> bool:
        return self.onboarding.should_run()

    @_guarded(None)
    def onboarding_step(self) -> Optional[OnboardingStep]:
        return self.onboarding.current_step()

    # ==================== Events & lifecycle ====================

    def subscribe(self, callback: Callable[[GuidanceEvent], None],
                  event_types: Optional[List[GuidanceEventType]] = None) -> str:
        """Subscribe to guidance events, returns the subscriber id"""
        return self.event_bus.subscribe(callback, event_types=event_types)

    def unsubscribe(self, subscriber_id: str) -> bool:
        return self.event_bus.unsubscribe(subscriber_id)

    @_guarded({})
    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the guidance state for rendering"""
        step_number, step_total = self.tutorials.progress()
        onboarding_number, onboarding_total = self.onboarding.progress()
        return {
            'current_route': self._current_route,
            'active_hint': self.state.active_hint.to_dict() if self.state.active_hint else None,
            'dismissed_hint_ids': list(self.state.dismissed_hint_ids),
            'active_tutorial': (self.state.active_tutorial.tutorial_id
                                if self.state.active_tutorial else None),
            'active_step_index': self.state.active_step_index,
            'tutorial_progress': {'step': step_number, 'total': step_total},
            'spotlight_element': self.tutorials.spotlight_element(),
            'completed_tutorial_ids': list(self.state.completed_tutorial_ids),
            'onboarding': {
                'step_index': self.state.onboarding_step_index,
                'step': onboarding_number,
                'total': onboarding_total,
                'selected_values': list(self.state.onboarding_selected_values),
                'can_proceed': self.onboarding.can_proceed(),
                'should_run': self.onboarding.should_run()
            }
        }

    @_guarded(None)
    def close(self):
        """Cancel any pending hint trigger and stop an owned scheduler"""
        self._cancel_pending_trigger()
        self._trigger_generation += 1
        if self._owns_scheduler:
            self.scheduler.shutdown()
        self.logger.debug("Guidance facade closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
