#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Guidance error taxonomy
None of these escape the GuidanceFacade; they mark the degraded paths
"""


class GuidanceError(Exception):
    """Base class for guided-experience errors"""


class UnknownIdError(GuidanceError):
    """Referenced hint or tutorial id is not in the catalog"""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"Unknown {kind} id: {item_id}")


class StorageUnavailableError(GuidanceError):
    """Persistent key/value storage could not be read or written"""

    def __init__(self, message: str, key: str = None):
        self.key = key
        super().__init__(message)


class InvalidGateStateError(GuidanceError):
    """Attempt to advance past a gated step without satisfying it"""

    def __init__(self, step_index: int, reason: str):
        self.step_index = step_index
        self.reason = reason
        super().__init__(f"Step {step_index} gate not satisfied: {reason}")
