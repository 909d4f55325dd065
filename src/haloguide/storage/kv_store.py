#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Persistent key/value store contract
Durable, profile-scoped string storage backing the guidance state
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..errors import StorageUnavailableError


class PersistentKeyValueStore(ABC):
    """
    Abstract durable key/value store scoped to one user profile

    ``get`` returns None for a missing key. A value written with ``set`` is
    visible to the next ``get`` of the same key on the same instance.
    Backends raise StorageUnavailableError when the medium cannot be used;
    callers decide whether to degrade.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string or None"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a string value"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored"""

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys"""

    def clear(self) -> None:
        """Remove every key of this profile"""
        for key in self.keys():
            self.remove(key)

    def items(self) -> Dict[str, str]:
        """Snapshot of all stored key/value pairs"""
        result = {}
        for key in self.keys():
            value = self.get(key)
            if value is not None:
                result[key] = value
        return result


class InMemoryKeyValueStore(PersistentKeyValueStore):
    """Session-only store; contents are lost with the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.logger = logging.getLogger('haloguide.storage.memory')
        self._data: Dict[str, str] = dict(initial or {})
        # Simulates a full or disabled storage medium
        self.unavailable = False

    def _check_available(self, key: str):
        if self.unavailable:
            raise StorageUnavailableError("in-memory store marked unavailable", key=key)

    def get(self, key: str) -> Optional[str]:
        self._check_available(key)
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_available(key)
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._check_available(key)
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        self._check_available("*")
        return list(self._data.keys())
