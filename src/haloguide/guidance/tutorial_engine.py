#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tutorial Engine
Runs linear step tutorials, tracks completion and enforces prerequisites
"""

import logging
from typing import List, Optional, Tuple

from .catalog import HintCatalog
from .models import (
    Tutorial, TutorialStep, TutorialStatus, TutorialAvailability, GuidanceState
)
from .persistence import GuidancePersistence
from ..core.event_bus import GuidanceEventBus, GuidanceEventType
from ..errors import UnknownIdError


class TutorialEngine:
    """
    Step tutorial player

    Per run: NotStarted -> InProgress(step) -> Completed, or back to
    NotStarted through ``abandon``. Advancing and completing are separate
    actions; ``next_step`` never completes a tutorial.
    """

    def __init__(self, catalog: HintCatalog, state: GuidanceState,
                 persistence: GuidancePersistence,
                 event_bus: Optional[GuidanceEventBus] = None):
        """
        Initialize tutorial engine

        Args:
            catalog: Tutorial catalog
            state: Shared guidance state
            persistence: Persistence adapter for the completed set
            event_bus: Optional bus for tutorial events
        """
        self.catalog = catalog
        self.state = state
        self.persistence = persistence
        self.event_bus = event_bus
        self.logger = logging.getLogger('haloguide.tutorial_engine')

    def _publish(self, event_type: GuidanceEventType, tutorial_id: str, **data):
        if self.event_bus:
            self.event_bus.publish(
                event_type, {'tutorial_id': tutorial_id, **data}, source='tutorial_engine'
            )

    # ==================== Queries ====================

    def is_completed(self, tutorial_id: str) -> bool:
        return tutorial_id in self.state.completed_tutorial_ids

    def missing_prerequisites(self, tutorial_id: str) -> List[str]:
        """Prerequisite ids not yet completed, in declaration order"""
        tutorial = self.catalog.get_tutorial(tutorial_id)
        if tutorial is None:
            return []
        return [p for p in tutorial.prerequisites if not self.is_completed(p)]

    def can_start(self, tutorial_id: str) -> bool:
        return (self.catalog.get_tutorial(tutorial_id) is not None
                and not self.missing_prerequisites(tutorial_id))

    def current_step(self) -> Optional[TutorialStep]:
        tutorial = self.state.active_tutorial
        if tutorial is None:
            return None
        return tutorial.steps[self.state.active_step_index]

    def spotlight_element(self) -> Optional[str]:
        """Target element of the current step, if it has one"""
        step = self.current_step()
        return step.target_element if step else None

    def progress(self) -> Tuple[int, int]:
        """
        Current position for "Step X of N" display

        Returns:
            Tuple[int, int]: (1-based step number, total steps), (0, 0) when idle
        """
        tutorial = self.state.active_tutorial
        if tutorial is None:
            return 0, 0
        return self.state.active_step_index + 1, tutorial.step_count

    def is_last_step(self) -> bool:
        tutorial = self.state.active_tutorial
        return tutorial is not None and self.state.active_step_index == tutorial.step_count - 1

    def available_tutorials(self) -> List[TutorialAvailability]:
        """All catalog tutorials with their status for this profile"""
        active_id = self.state.active_tutorial.tutorial_id if self.state.active_tutorial else None
        result = []
        for tutorial in self.catalog.tutorials:
            missing = tuple(self.missing_prerequisites(tutorial.tutorial_id))
            if tutorial.tutorial_id == active_id:
                status = TutorialStatus.IN_PROGRESS
            elif self.is_completed(tutorial.tutorial_id):
                status = TutorialStatus.COMPLETED
            elif missing:
                status = TutorialStatus.LOCKED
            else:
                status = TutorialStatus.AVAILABLE
            result.append(TutorialAvailability(tutorial, status, missing))
        return result

    # ==================== Transitions ====================

    def start_tutorial(self, tutorial_id: str) -> bool:
        """
        Start (or restart) a tutorial at its first step

        Refused without raising when the id is unknown or a prerequisite has
        not been completed; the UI is expected to disable the control.

        Args:
            tutorial_id: Tutorial ID

        Returns:
            bool: Whether the tutorial is now active
        """
        tutorial = self.catalog.get_tutorial(tutorial_id)
        if tutorial is None:
            self.logger.debug(str(UnknownIdError('tutorial', tutorial_id)))
            return False

        missing = self.missing_prerequisites(tutorial_id)
        if missing:
            self.logger.debug(f"Tutorial {tutorial_id} locked, missing prerequisites: {missing}")
            return False

        self.state.active_tutorial = tutorial
        self.state.active_step_index = 0
        self.logger.info(f"Started tutorial {tutorial_id}")
        self._publish(GuidanceEventType.TUTORIAL_STARTED, tutorial_id, step_index=0)
        return True

    def next_step(self) -> bool:
        """Advance one step; no-op on the last step"""
        tutorial = self.state.active_tutorial
        if tutorial is None or self.state.active_step_index >= tutorial.step_count - 1:
            return False

        self.state.active_step_index += 1
        self._publish(GuidanceEventType.TUTORIAL_STEP_CHANGED, tutorial.tutorial_id,
                      step_index=self.state.active_step_index)
        return True

    def previous_step(self) -> bool:
        """Go back one step, floored at the first"""
        tutorial = self.state.active_tutorial
        if tutorial is None or self.state.active_step_index == 0:
            return False

        self.state.active_step_index -= 1
        self._publish(GuidanceEventType.TUTORIAL_STEP_CHANGED, tutorial.tutorial_id,
                      step_index=self.state.active_step_index)
        return True

    def complete_tutorial(self, tutorial_id: str) -> bool:
        """
        Mark a tutorial complete and close the tutorial surface

        Any catalog id is accepted, not only the active one, so "mark as
        read" flows can complete a tutorial out of band. The active slot is
        cleared in both cases.

        Args:
            tutorial_id: Tutorial ID

        Returns:
            bool: False only for ids outside the catalog
        """
        if self.catalog.get_tutorial(tutorial_id) is None:
            self.logger.debug(str(UnknownIdError('tutorial', tutorial_id)))
            return False

        active = self.state.active_tutorial
        if active is not None and active.tutorial_id != tutorial_id:
            self.logger.debug(
                f"Completing {tutorial_id} while {active.tutorial_id} is active"
            )

        newly_completed = tutorial_id not in self.state.completed_tutorial_ids
        if newly_completed:
            self.state.completed_tutorial_ids.append(tutorial_id)
            self.persistence.save_completed(self.state)

        self.state.active_tutorial = None
        self.state.active_step_index = 0

        self.logger.info(f"Completed tutorial {tutorial_id}")
        self._publish(GuidanceEventType.TUTORIAL_COMPLETED, tutorial_id,
                      newly_completed=newly_completed)
        return True

    def abandon(self) -> bool:
        """Close the active tutorial without completing it"""
        tutorial = self.state.active_tutorial
        if tutorial is None:
            return False

        step_index = self.state.active_step_index
        self.state.active_tutorial = None
        self.state.active_step_index = 0
        self.logger.debug(f"Abandoned tutorial {tutorial.tutorial_id} at step {step_index}")
        self._publish(GuidanceEventType.TUTORIAL_ABANDONED, tutorial.tutorial_id,
                      step_index=step_index)
        return True

    def reset_progress(self):
        """Forget every completed tutorial for this profile"""
        self.state.completed_tutorial_ids.clear()
        self.persistence.save_completed(self.state)
        self.logger.info("Cleared completed tutorials")
