#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Onboarding Wizard
Five-step first-run sequence with a value-selection gate at step 2
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .catalog import ONBOARDING_STEPS
from .models import OnboardingStep, GuidanceState
from .persistence import GuidancePersistence
from ..core.event_bus import GuidanceEventBus, GuidanceEventType
from ..errors import InvalidGateStateError
from ..utils.constants import (
    ONBOARDING_LAST_STEP, VALUES_STEP_INDEX, REQUIRED_VALUE_COUNT,
    VALUE_PALETTE, ONBOARDING_PROGRESS_KEYS, ONBOARDING_COMPLETED_KEY,
    ONBOARDING_DESTINATIONS
)


class OnboardingWizard:
    """
    Linear onboarding state machine

    Step index runs 0..4. The only conditional transition is leaving step 2,
    which requires exactly three selected value tags. Every step or
    selection change is persisted immediately so a reload resumes in place.
    """

    def __init__(self, state: GuidanceState, persistence: GuidancePersistence,
                 event_bus: Optional[GuidanceEventBus] = None,
                 on_complete: Optional[Callable[[bool], None]] = None,
                 palette: Sequence[str] = VALUE_PALETTE):
        """
        Initialize onboarding wizard

        Args:
            state: Shared guidance state (already hydrated)
            persistence: Persistence adapter
            event_bus: Optional bus for onboarding events
            on_complete: Called with ``skipped`` when the wizard finishes
            palette: Selectable value tags
        """
        self.state = state
        self.persistence = persistence
        self.event_bus = event_bus
        self.on_complete = on_complete
        self.palette: Tuple[str, ...] = tuple(palette)
        self.steps: Tuple[OnboardingStep, ...] = ONBOARDING_STEPS
        self.logger = logging.getLogger('haloguide.onboarding')

        self._sanitize_hydrated_state()
        self.completed = self.persistence.read_flag(ONBOARDING_COMPLETED_KEY)

    def _sanitize_hydrated_state(self):
        """
        Clamp the step index and trim the persisted selection to three tags

        Tags are not checked against the palette here: a selection saved
        under an older palette is resumed as-is and can still be toggled off.
        """
        index = self.state.onboarding_step_index
        if not 0 <= index <= ONBOARDING_LAST_STEP:
            self.logger.warning(f"Persisted onboarding step {index} out of range, restarting at 0")
            self.state.onboarding_step_index = 0

        values: List[str] = []
        for tag in self.state.onboarding_selected_values:
            if tag not in values:
                values.append(tag)
        if len(values) > REQUIRED_VALUE_COUNT:
            values = values[:REQUIRED_VALUE_COUNT]
        if values != self.state.onboarding_selected_values:
            self.logger.warning("Dropped invalid persisted onboarding values")
            self.state.onboarding_selected_values = values

    def _publish(self, event_type: GuidanceEventType, **data):
        if self.event_bus:
            self.event_bus.publish(event_type, data, source='onboarding_wizard')

    def _persist(self):
        self.persistence.save_onboarding(self.state)

    # ==================== Queries ====================

    @property
    def step_index(self) -> int:
        return self.state.onboarding_step_index

    @property
    def selected_values(self) -> List[str]:
        return list(self.state.onboarding_selected_values)

    def current_step(self) -> OnboardingStep:
        return self.steps[self.state.onboarding_step_index]

    def progress(self) -> Tuple[int, int]:
        """(1-based step number, total steps)"""
        return self.state.onboarding_step_index + 1, len(self.steps)

    def is_last_step(self) -> bool:
        return self.state.onboarding_step_index == ONBOARDING_LAST_STEP

    def gate_error(self) -> Optional[InvalidGateStateError]:
        """Why ``next`` would be refused right now, or None"""
        if (self.state.onboarding_step_index == VALUES_STEP_INDEX
                and len(self.state.onboarding_selected_values) != REQUIRED_VALUE_COUNT):
            return InvalidGateStateError(
                VALUES_STEP_INDEX,
                f"{len(self.state.onboarding_selected_values)}/{REQUIRED_VALUE_COUNT} values selected"
            )
        return None

    def can_proceed(self) -> bool:
        return self.gate_error() is None

    def is_complete(self) -> bool:
        return self.completed

    def should_run(self) -> bool:
        """Whether the wizard still needs to be shown for this profile"""
        return not self.completed

    def destinations(self) -> dict:
        """Post-onboarding routes offered on the last step"""
        return dict(ONBOARDING_DESTINATIONS)

    # ==================== Transitions ====================

    def next(self) -> bool:
        """
        Advance one step, or finish from the last step

        A refused transition still writes the current step and selection.

        Returns:
            bool: False when the step 2 gate refused the transition
        """
        error = self.gate_error()
        if error is not None:
            self.logger.debug(str(error))
            self._persist()
            return False

        if self.is_last_step():
            return self.finish()

        self.state.onboarding_step_index += 1
        self._persist()
        self.logger.debug(f"Onboarding advanced to step {self.state.onboarding_step_index}")
        self._publish(GuidanceEventType.ONBOARDING_STEP_CHANGED,
                      step_index=self.state.onboarding_step_index)
        return True

    def previous(self) -> bool:
        """Go back one step, floored at 0"""
        if self.state.onboarding_step_index > 0:
            self.state.onboarding_step_index -= 1
            moved = True
        else:
            moved = False

        self._persist()
        if moved:
            self._publish(GuidanceEventType.ONBOARDING_STEP_CHANGED,
                          step_index=self.state.onboarding_step_index)
        return moved

    def toggle_value(self, tag: str) -> bool:
        """
        Select or deselect a value tag

        A selected tag is removed; an unselected one is added while fewer
        than three are selected. Adding a fourth is a no-op, as is any tag
        outside the palette.

        Args:
            tag: Value tag

        Returns:
            bool: Whether the selection changed
        """
        values = self.state.onboarding_selected_values
        if tag in values:
            values.remove(tag)
            changed = True
        elif tag not in self.palette:
            self.logger.debug(f"Ignoring value tag outside palette: {tag}")
            changed = False
        elif len(values) < REQUIRED_VALUE_COUNT:
            values.append(tag)
            changed = True
        else:
            changed = False

        self._persist()
        if changed:
            self._publish(GuidanceEventType.ONBOARDING_VALUES_CHANGED, selected_values=list(values))
        return changed

    def _complete(self, skipped: bool) -> bool:
        for key in ONBOARDING_PROGRESS_KEYS:
            self.persistence.delete(key)
        self.persistence.write_flag(ONBOARDING_COMPLETED_KEY, True)

        from_step = self.state.onboarding_step_index
        selected = list(self.state.onboarding_selected_values)
        self.state.onboarding_step_index = 0
        self.state.onboarding_selected_values = []
        self.completed = True

        self.logger.info(f"Onboarding {'skipped' if skipped else 'finished'} at step {from_step}")
        self._publish(
            GuidanceEventType.ONBOARDING_SKIPPED if skipped else GuidanceEventType.ONBOARDING_FINISHED,
            from_step=from_step, selected_values=selected
        )
        if self.on_complete:
            self.on_complete(skipped)
        return True

    def finish(self) -> bool:
        """Clear persisted progress and signal completion"""
        return self._complete(skipped=False)

    def skip(self) -> bool:
        """Finish from any step; confirmation is the UI's job"""
        return self._complete(skipped=True)

    def restart(self) -> bool:
        """Run the wizard again from the first step with no values"""
        self.state.onboarding_step_index = 0
        self.state.onboarding_selected_values = []
        self.completed = False
        self.persistence.write_flag(ONBOARDING_COMPLETED_KEY, False)
        self._persist()
        self.logger.info("Onboarding restarted")
        self._publish(GuidanceEventType.ONBOARDING_RESTARTED)
        return True
