#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Guidance data model
Immutable catalog records and the mutable per-session guidance state
"""

from typing import Dict, List, Any, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


class HintPriority(Enum):
    """Hint priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class HintCategory(Enum):
    """Hint category"""
    NAVIGATION = "navigation"
    FEATURE = "feature"
    TIP = "tip"
    TUTORIAL = "tutorial"


class HintPosition(Enum):
    """Where the hint card is anchored on screen"""
    TOP_RIGHT = "top-right"
    BOTTOM_RIGHT = "bottom-right"
    CENTER = "center"
    BOTTOM_CENTER = "bottom-center"


class TutorialCategory(Enum):
    """Tutorial category"""
    GETTING_STARTED = "getting-started"
    FEATURE = "feature"
    ADVANCED = "advanced"


class StepPosition(Enum):
    """Placement of a tutorial step relative to its target element"""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class StepActionType(Enum):
    """Action a tutorial step asks the user to perform"""
    CLICK = "click"
    INPUT = "input"
    NAVIGATE = "navigate"


class TutorialStatus(Enum):
    """Tutorial availability for the current profile"""
    LOCKED = "locked"            # Prerequisites missing
    AVAILABLE = "available"      # Can be started
    IN_PROGRESS = "in_progress"  # Currently running
    COMPLETED = "completed"      # Marked complete


@dataclass(frozen=True)
class Hint:
    """Route-scoped, dismissible guidance message"""
    hint_id: str
    title: str
    body: str
    route: str
    position: HintPosition = HintPosition.BOTTOM_RIGHT
    priority: HintPriority = HintPriority.MEDIUM
    category: HintCategory = HintCategory.TIP
    trigger_element: Optional[str] = None  # CSS selector the card points at

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.hint_id,
            'title': self.title,
            'body': self.body,
            'route': self.route,
            'position': self.position.value,
            'priority': self.priority.value,
            'category': self.category.value,
            'trigger_element': self.trigger_element
        }


@dataclass(frozen=True)
class StepAction:
    """Action attached to a tutorial step"""
    action_type: StepActionType
    target: str


@dataclass(frozen=True)
class TutorialStep:
    """One instructional step"""
    title: str
    body: str
    target_element: Optional[str] = None  # CSS selector to spotlight
    position: Optional[StepPosition] = None
    action: Optional[StepAction] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'body': self.body,
            'target_element': self.target_element,
            'position': self.position.value if self.position else None,
            'action': {
                'type': self.action.action_type.value,
                'target': self.action.target
            } if self.action else None
        }


@dataclass(frozen=True)
class Tutorial:
    """Named, ordered sequence of tutorial steps"""
    tutorial_id: str
    title: str
    description: str
    category: TutorialCategory
    steps: Tuple[TutorialStep, ...]
    estimated_minutes: int = 5
    prerequisites: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.steps:
            raise ValueError(f"Tutorial {self.tutorial_id} has no steps")

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.tutorial_id,
            'title': self.title,
            'description': self.description,
            'category': self.category.value,
            'estimated_minutes': self.estimated_minutes,
            'prerequisites': list(self.prerequisites),
            'steps': [step.to_dict() for step in self.steps]
        }


@dataclass(frozen=True)
class TutorialAvailability:
    """Tutorial listing entry for the tutorial picker"""
    tutorial: Tutorial
    status: TutorialStatus
    missing_prerequisites: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OnboardingStep:
    """One of the five fixed onboarding steps"""
    index: int
    title: str
    description: str
    gated: bool = False  # Requires the value selection before advancing


@dataclass
class GuidanceState:
    """
    Runtime guidance state held by the facade

    Only dismissed_hint_ids, completed_tutorial_ids, onboarding_step_index and
    onboarding_selected_values are ever persisted. The id lists behave as
    insertion-ordered sets.
    """
    active_hint: Optional[Hint] = None
    dismissed_hint_ids: List[str] = field(default_factory=list)
    active_tutorial: Optional[Tutorial] = None
    active_step_index: int = 0
    completed_tutorial_ids: List[str] = field(default_factory=list)
    onboarding_step_index: int = 0
    onboarding_selected_values: List[str] = field(default_factory=list)
