#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Guided Experience System
Onboarding wizard, contextual hints and step tutorials behind one facade
"""

from .guidance_facade import GuidanceFacade
from .hint_engine import HintEngine
from .tutorial_engine import TutorialEngine
from .onboarding_wizard import OnboardingWizard
from .catalog import HintCatalog, default_catalog
from .persistence import GuidancePersistence
from .models import (
    Hint, HintPriority, HintCategory, HintPosition,
    Tutorial, TutorialStep, TutorialCategory, TutorialStatus, TutorialAvailability,
    StepPosition, StepAction, StepActionType,
    OnboardingStep, GuidanceState
)

__all__ = [
    'GuidanceFacade',
    'HintEngine',
    'TutorialEngine',
    'OnboardingWizard',
    'HintCatalog',
    'default_catalog',
    'GuidancePersistence',
    'Hint', 'HintPriority', 'HintCategory', 'HintPosition',
    'Tutorial', 'TutorialStep', 'TutorialCategory', 'TutorialStatus', 'TutorialAvailability',
    'StepPosition', 'StepAction', 'StepActionType',
    'OnboardingStep', 'GuidanceState'
]
