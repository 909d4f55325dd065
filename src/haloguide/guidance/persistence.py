#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Guidance state persistence
Hydrates GuidanceState from the key/value store and flushes mutations back
"""

import logging
from typing import Callable, Iterable, List, Optional

from .models import GuidanceState
from ..errors import StorageUnavailableError
from ..storage.kv_store import PersistentKeyValueStore
from ..utils.constants import (
    HINTS_DISMISSED_KEY, TUTORIALS_COMPLETED_KEY,
    ONBOARDING_STEP_KEY, ONBOARDING_VALUES_KEY
)
from ..utils.helpers import encode_id_list, decode_id_list


class GuidancePersistence:
    """
    Failure-absorbing wrapper around a PersistentKeyValueStore

    Reads that fail return the caller's fallback, writes that fail are logged
    and reported through ``on_degraded``; nothing is raised. The in-memory
    state stays authoritative for the rest of the session either way.
    """

    def __init__(self, store: PersistentKeyValueStore,
                 on_degraded: Optional[Callable[[str, str], None]] = None):
        """
        Initialize persistence adapter

        Args:
            store: Underlying key/value store
            on_degraded: Called with (operation, key) whenever storage fails
        """
        self.store = store
        self.on_degraded = on_degraded
        self.logger = logging.getLogger('haloguide.persistence')
        self.failure_count = 0

    def _degraded(self, operation: str, key: str, error: Exception):
        self.failure_count += 1
        self.logger.warning(
            f"Storage {operation} failed for '{key}', continuing with session-only state: {error}"
        )
        if self.on_degraded:
            try:
                self.on_degraded(operation, key)
            except Exception as e:
                self.logger.error(f"Degraded-storage callback failed: {e}")

    # ==================== Raw access ====================

    def read(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except StorageUnavailableError as e:
            self._degraded('read', key, e)
        except Exception as e:
            self.logger.error(f"Unexpected storage error reading '{key}': {e}")
            self._degraded('read', key, e)
        return None

    def write(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
            return True
        except StorageUnavailableError as e:
            self._degraded('write', key, e)
        except Exception as e:
            self.logger.error(f"Unexpected storage error writing '{key}': {e}")
            self._degraded('write', key, e)
        return False

    def delete(self, key: str) -> bool:
        try:
            self.store.remove(key)
            return True
        except StorageUnavailableError as e:
            self._degraded('remove', key, e)
        except Exception as e:
            self.logger.error(f"Unexpected storage error removing '{key}': {e}")
            self._degraded('remove', key, e)
        return False

    # ==================== Typed access ====================

    def read_id_list(self, key: str) -> List[str]:
        """Read a JSON string array; corrupt payloads read as empty"""
        raw = self.read(key)
        try:
            return decode_id_list(raw)
        except ValueError as e:
            self.logger.warning(f"Ignoring corrupt value for '{key}': {e}")
            return []

    def write_id_list(self, key: str, values: Iterable[str]) -> bool:
        return self.write(key, encode_id_list(values))

    def read_int(self, key: str, default: int = 0) -> int:
        raw = self.read(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError:
            self.logger.warning(f"Ignoring non-integer value for '{key}': {raw!r}")
            return default

    def write_int(self, key: str, value: int) -> bool:
        return self.write(key, str(int(value)))

    def read_flag(self, key: str) -> bool:
        raw = self.read(key)
        return raw is not None and raw.strip().lower() == 'true'

    def write_flag(self, key: str, value: bool) -> bool:
        if value:
            return self.write(key, 'true')
        return self.delete(key)

    # ==================== State lifecycle ====================

    def hydrate(self) -> GuidanceState:
        """
        Build a fresh GuidanceState from the store

        Only the persisted fields are read; transient slots start empty.
        Onboarding values are validated later by the wizard.

        Returns:
            GuidanceState: Hydrated state
        """
        state = GuidanceState(
            dismissed_hint_ids=self.read_id_list(HINTS_DISMISSED_KEY),
            completed_tutorial_ids=self.read_id_list(TUTORIALS_COMPLETED_KEY),
            onboarding_step_index=self.read_int(ONBOARDING_STEP_KEY, 0),
            onboarding_selected_values=self.read_id_list(ONBOARDING_VALUES_KEY)
        )
        self.logger.debug(
            f"Hydrated guidance state: {len(state.dismissed_hint_ids)} dismissed hints, "
            f"{len(state.completed_tutorial_ids)} completed tutorials, "
            f"onboarding step {state.onboarding_step_index}"
        )
        return state

    def save_dismissed(self, state: GuidanceState) -> bool:
        return self.write_id_list(HINTS_DISMISSED_KEY, state.dismissed_hint_ids)

    def save_completed(self, state: GuidanceState) -> bool:
        return self.write_id_list(TUTORIALS_COMPLETED_KEY, state.completed_tutorial_ids)

    def save_onboarding(self, state: GuidanceState) -> bool:
        step_ok = self.write_int(ONBOARDING_STEP_KEY, state.onboarding_step_index)
        values_ok = self.write_id_list(ONBOARDING_VALUES_KEY, state.onboarding_selected_values)
        return step_ok and values_ok
