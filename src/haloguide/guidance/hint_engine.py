#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hint Engine
Decides which route hint should surface and tracks permanent dismissal
"""

import logging
from typing import List, Optional

from .catalog import HintCatalog
from .models import Hint, HintPriority, GuidanceState
from .persistence import GuidancePersistence
from ..core.event_bus import GuidanceEventBus, GuidanceEventType
from ..errors import UnknownIdError
from ..utils.constants import DEFAULT_ROUTE


class HintEngine:
    """Contextual hint surfacer"""

    def __init__(self, catalog: HintCatalog, state: GuidanceState,
                 persistence: GuidancePersistence,
                 event_bus: Optional[GuidanceEventBus] = None,
                 default_route: str = DEFAULT_ROUTE):
        """
        Initialize hint engine

        Args:
            catalog: Hint catalog
            state: Shared guidance state
            persistence: Persistence adapter for the dismissed set
            event_bus: Optional bus for hint events
            default_route: Route the application root resolves to
        """
        self.catalog = catalog
        self.default_route = default_route
        self.state = state
        self.persistence = persistence
        self.event_bus = event_bus
        self.logger = logging.getLogger('haloguide.hint_engine')

    def _publish(self, event_type: GuidanceEventType, hint_id: str, **data):
        if self.event_bus:
            self.event_bus.publish(event_type, {'hint_id': hint_id, **data}, source='hint_engine')

    def is_dismissed(self, hint_id: str) -> bool:
        return hint_id in self.state.dismissed_hint_ids

    def show_hint(self, hint_id: str) -> bool:
        """
        Make a hint the active hint

        Unknown and dismissed ids are ignored.

        Args:
            hint_id: Hint ID

        Returns:
            bool: Whether the hint is now active
        """
        hint = self.catalog.get_hint(hint_id)
        if hint is None:
            self.logger.debug(str(UnknownIdError('hint', hint_id)))
            return False

        if self.is_dismissed(hint_id):
            self.logger.debug(f"Hint {hint_id} is dismissed, not showing")
            return False

        self.state.active_hint = hint
        self.logger.debug(f"Showing hint {hint_id}")
        self._publish(GuidanceEventType.HINT_SHOWN, hint_id, route=hint.route)
        return True

    def hide_hint(self) -> bool:
        """Clear the active hint without dismissing it"""
        hint = self.state.active_hint
        if hint is None:
            return False

        self.state.active_hint = None
        self._publish(GuidanceEventType.HINT_HIDDEN, hint.hint_id)
        return True

    def dismiss_hint(self, hint_id: str) -> bool:
        """
        Permanently suppress a hint for this profile

        Calling it again for the same id changes nothing. Ids outside the
        catalog are still recorded so a later catalog revision honours them.

        Args:
            hint_id: Hint ID

        Returns:
            bool: True if the dismissed set changed
        """
        changed = False
        if hint_id not in self.state.dismissed_hint_ids:
            self.state.dismissed_hint_ids.append(hint_id)
            self.persistence.save_dismissed(self.state)
            changed = True
            self.logger.info(f"Dismissed hint {hint_id}")

        if self.state.active_hint is not None and self.state.active_hint.hint_id == hint_id:
            self.state.active_hint = None

        if changed:
            self._publish(GuidanceEventType.HINT_DISMISSED, hint_id)
        return changed

    def hints_for_route(self, route: str) -> List[Hint]:
        """Eligible (not dismissed) hints for a route in catalog order"""
        return [
            hint for hint in self.catalog.hints_for_route(route, self.default_route)
            if not self.is_dismissed(hint.hint_id)
        ]

    def select_hint_for_route(self, route: str) -> Optional[Hint]:
        """
        Pick the hint to surface for a route

        The first high-priority eligible hint in catalog order wins; failing
        that, the first eligible hint; None when nothing is eligible.

        Args:
            route: Current route

        Returns:
            Optional[Hint]: Selected hint
        """
        candidates = self.hints_for_route(route)
        if not candidates:
            return None

        for hint in candidates:
            if hint.priority == HintPriority.HIGH:
                return hint
        return candidates[0]

    def reset_dismissals(self):
        """Forget every dismissal for this profile"""
        self.state.dismissed_hint_ids.clear()
        self.persistence.save_dismissed(self.state)
        self.logger.info("Cleared dismissed hints")
