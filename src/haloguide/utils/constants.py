#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Constants definition module
Defines storage keys, onboarding palette and defaults used by haloguide
"""

from typing import Dict, List, Tuple

# ==================== Persisted Storage Keys ====================

ONBOARDING_STEP_KEY = "onboarding.stepIndex"
ONBOARDING_VALUES_KEY = "onboarding.selectedValues"
ONBOARDING_COMPLETED_KEY = "onboarding.completed"
HINTS_DISMISSED_KEY = "hints.dismissedIds"
TUTORIALS_COMPLETED_KEY = "tutorials.completedIds"

# Keys owned by the onboarding wizard (cleared on finish/skip)
ONBOARDING_PROGRESS_KEYS: Tuple[str, ...] = (ONBOARDING_STEP_KEY, ONBOARDING_VALUES_KEY)

ALL_GUIDANCE_KEYS: Tuple[str, ...] = (
    ONBOARDING_STEP_KEY,
    ONBOARDING_VALUES_KEY,
    ONBOARDING_COMPLETED_KEY,
    HINTS_DISMISSED_KEY,
    TUTORIALS_COMPLETED_KEY,
)

# ==================== Onboarding Wizard ====================

ONBOARDING_STEP_COUNT = 5
ONBOARDING_LAST_STEP = ONBOARDING_STEP_COUNT - 1
VALUES_STEP_INDEX = 2           # The only gated step
REQUIRED_VALUE_COUNT = 3        # Exactly this many tags before advancing

VALUE_PALETTE: List[str] = [
    'Authenticity',
    'Creative Expression',
    'Meaningful Impact',
    'Personal Growth',
    'Connection',
    'Freedom',
    'Health',
    'Learning',
    'Service',
]

# Post-onboarding destinations offered on the last step
ONBOARDING_DESTINATIONS: Dict[str, str] = {
    'checkin': '/checkin',
    'chat': '/chat',
}

# ==================== Hints ====================

HINT_SETTLE_DELAY_SECONDS = 1.0
DEFAULT_ROUTE = "/dashboard"

# ==================== Storage ====================

DEFAULT_DATA_DIRECTORY = "~/.haloguide"
DEFAULT_PROFILE = "default"
STORAGE_BACKENDS: Tuple[str, ...] = ('memory', 'json', 'sqlite')
SQLITE_DATABASE_NAME = "guidance.db"
PROFILES_DIRECTORY_NAME = "profiles"
