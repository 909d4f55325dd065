#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hint Catalog
Static set of hints, tutorials and onboarding steps the engines reference
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .models import (
    Hint, HintPriority, HintCategory, HintPosition,
    Tutorial, TutorialStep, TutorialCategory, StepPosition, StepAction, StepActionType,
    OnboardingStep
)
from ..utils.constants import VALUES_STEP_INDEX, DEFAULT_ROUTE
from ..utils.helpers import normalize_route


class HintCatalog:
    """Immutable, ordered catalog of hints and tutorials"""

    def __init__(self, hints: Iterable[Hint] = (), tutorials: Iterable[Tutorial] = ()):
        """
        Initialize catalog

        Args:
            hints: Hints in catalog order (order breaks priority ties)
            tutorials: Tutorials in display order

        Raises:
            ValueError: On duplicate ids or unknown prerequisite ids
        """
        self._hints: Tuple[Hint, ...] = tuple(hints)
        self._tutorials: Tuple[Tutorial, ...] = tuple(tutorials)

        self._hints_by_id: Dict[str, Hint] = {}
        for hint in self._hints:
            if hint.hint_id in self._hints_by_id:
                raise ValueError(f"Duplicate hint id: {hint.hint_id}")
            self._hints_by_id[hint.hint_id] = hint

        self._tutorials_by_id: Dict[str, Tutorial] = {}
        for tutorial in self._tutorials:
            if tutorial.tutorial_id in self._tutorials_by_id:
                raise ValueError(f"Duplicate tutorial id: {tutorial.tutorial_id}")
            self._tutorials_by_id[tutorial.tutorial_id] = tutorial

        for tutorial in self._tutorials:
            for prereq in tutorial.prerequisites:
                if prereq not in self._tutorials_by_id:
                    raise ValueError(
                        f"Tutorial {tutorial.tutorial_id} requires unknown tutorial {prereq}"
                    )
                if prereq == tutorial.tutorial_id:
                    raise ValueError(f"Tutorial {tutorial.tutorial_id} requires itself")

    @property
    def hints(self) -> Tuple[Hint, ...]:
        return self._hints

    @property
    def tutorials(self) -> Tuple[Tutorial, ...]:
        return self._tutorials

    def get_hint(self, hint_id: str) -> Optional[Hint]:
        return self._hints_by_id.get(hint_id)

    def get_tutorial(self, tutorial_id: str) -> Optional[Tutorial]:
        return self._tutorials_by_id.get(tutorial_id)

    def hints_for_route(self, route: str, default_route: str = DEFAULT_ROUTE) -> List[Hint]:
        """
        Hints registered for a route, in catalog order

        Both the requested route and the catalog routes are normalised, with
        the bare root resolving to ``default_route``.
        """
        route = normalize_route(route, default_route)
        return [
            hint for hint in self._hints
            if normalize_route(hint.route, default_route) == route
        ]

    def routes(self, default_route: str = DEFAULT_ROUTE) -> List[str]:
        """Distinct hint routes in first-seen order"""
        seen: List[str] = []
        for hint in self._hints:
            route = normalize_route(hint.route, default_route)
            if route not in seen:
                seen.append(route)
        return seen


# ==================== Product Catalog ====================

DEFAULT_HINTS: Tuple[Hint, ...] = (
    Hint(
        hint_id="welcome-hint",
        title="Welcome to Growth Halo",
        body="Start your journey by chatting with Bliss or taking a daily check-in.",
        route="/dashboard",
        position=HintPosition.CENTER,
        priority=HintPriority.HIGH,
        category=HintCategory.TUTORIAL
    ),
    Hint(
        hint_id="dashboard-halo",
        title="Understanding Your Halo Ring",
        body="The halo ring shows your current growth phase. Each color represents "
             "expansion, contraction, or renewal.",
        route="/dashboard",
        position=HintPosition.TOP_RIGHT,
        priority=HintPriority.MEDIUM,
        category=HintCategory.NAVIGATION,
        trigger_element='[data-tutorial="halo-ring"]'
    ),
    Hint(
        hint_id="dashboard-insights",
        title="Weekly Insights",
        body="Bliss analyzes your patterns and surfaces key insights. Check them weekly "
             "for personalized guidance.",
        route="/dashboard",
        priority=HintPriority.LOW,
        category=HintCategory.TIP
    ),
    Hint(
        hint_id="chat-templates",
        title="Use Chat Templates",
        body="Start with conversation templates to get the most from Bliss. They guide "
             "deeper reflection.",
        route="/chat",
        position=HintPosition.BOTTOM_CENTER,
        priority=HintPriority.HIGH,
        category=HintCategory.TIP,
        trigger_element='[data-tutorial="chat-templates"]'
    ),
    Hint(
        hint_id="chat-memory",
        title="Bliss Remembers",
        body="Bliss recalls past conversations to provide context-aware guidance. The more "
             "you chat, the better it gets.",
        route="/chat",
        priority=HintPriority.LOW,
        category=HintCategory.FEATURE
    ),
    Hint(
        hint_id="goals-auto-detect",
        title="Automatic Goal Detection",
        body="Mention goals in conversation and Bliss automatically tracks them for you.",
        route="/goals",
        priority=HintPriority.MEDIUM,
        category=HintCategory.FEATURE
    ),
    Hint(
        hint_id="journal-prompts",
        title="Daily Prompts",
        body="Use Bliss-generated prompts to deepen your reflection practice.",
        route="/journal",
        priority=HintPriority.MEDIUM,
        category=HintCategory.TIP,
        trigger_element='[data-tutorial="journal"]'
    ),
)

DEFAULT_TUTORIALS: Tuple[Tutorial, ...] = (
    Tutorial(
        tutorial_id="getting-started",
        title="Getting Started with Growth Halo",
        description="Learn the basics of navigating your personal development journey",
        category=TutorialCategory.GETTING_STARTED,
        estimated_minutes=5,
        steps=(
            TutorialStep(
                title="Welcome to Growth Halo",
                body="Growth Halo is based on the philosophy that growth happens in cycles - "
                     "not straight lines. You'll experience expansion, contraction, and "
                     "renewal phases."
            ),
            TutorialStep(
                title="Meet Bliss, Your AI Companion",
                body="Bliss learns your patterns and provides personalized guidance. Start "
                     "with the chat templates to begin meaningful conversations.",
                target_element='[data-tutorial="chat-templates"]',
                position=StepPosition.BOTTOM
            ),
            TutorialStep(
                title="Track Your Growth Phase",
                body="The halo ring shows your current phase. Each phase has different needs "
                     "and opportunities for growth.",
                target_element='[data-tutorial="halo-ring"]',
                position=StepPosition.LEFT
            ),
            TutorialStep(
                title="Navigation Basics",
                body="Use the sidebar to access your dashboard, journal, analytics, and more.",
                target_element="nav",
                position=StepPosition.RIGHT
            ),
        )
    ),
    Tutorial(
        tutorial_id="values-discovery",
        title="Values Discovery",
        description="Understand what matters most to you and use it as your north star",
        category=TutorialCategory.GETTING_STARTED,
        estimated_minutes=8,
        steps=(
            TutorialStep(
                title="Why Values Matter",
                body="Your core values act as a compass for decisions. When you're aligned "
                     "with your values, you experience more fulfillment."
            ),
            TutorialStep(
                title="Compass Assessment",
                body="Take the Values Compass assessment to identify your top values.",
                target_element='[data-tutorial="values-compass"]',
                position=StepPosition.TOP,
                action=StepAction(StepActionType.NAVIGATE, "/values")
            ),
            TutorialStep(
                title="Using Values for Decisions",
                body='When facing a choice, ask: "Which option aligns better with my values?"'
            ),
            TutorialStep(
                title="Values Evolution Over Time",
                body="Your values may shift as you grow. Revisit your compass quarterly."
            ),
        )
    ),
    Tutorial(
        tutorial_id="daily-practice",
        title="Daily Practice",
        description="Build consistent habits for sustainable growth",
        category=TutorialCategory.GETTING_STARTED,
        estimated_minutes=6,
        steps=(
            TutorialStep(
                title="Daily Check-ins",
                body="Start each day with a quick check-in across mental, physical, "
                     "emotional, and spiritual energy.",
                target_element='[data-tutorial="daily-checkin"]',
                position=StepPosition.TOP
            ),
            TutorialStep(
                title="Energy Tracking",
                body="Notice when you have the most creative energy or need rest."
            ),
            TutorialStep(
                title="Journaling Effectively",
                body="Write freely without judgment. Bliss can help you reflect on entries.",
                target_element='[data-tutorial="journal"]',
                position=StepPosition.BOTTOM
            ),
            TutorialStep(
                title="Building Consistency",
                body="Small daily actions compound over time.",
                target_element='[data-tutorial="streak"]',
                position=StepPosition.LEFT
            ),
        )
    ),
    Tutorial(
        tutorial_id="advanced-features",
        title="Advanced Features",
        description="Unlock deeper insights with AI-powered pattern recognition",
        category=TutorialCategory.ADVANCED,
        estimated_minutes=12,
        prerequisites=("getting-started",),
        steps=(
            TutorialStep(
                title="Pattern Recognition",
                body="Bliss identifies recurring themes and behavioral patterns.",
                target_element='[data-tutorial="patterns"]',
                position=StepPosition.TOP
            ),
            TutorialStep(
                title="Contradiction Detection",
                body="When your stated goals conflict with your actions, Bliss gently "
                     "points this out."
            ),
            TutorialStep(
                title="Hypothesis Formation",
                body="Bliss forms hypotheses about what helps you thrive and tests them "
                     "over time."
            ),
            TutorialStep(
                title="Wisdom Library",
                body="Your most valuable insights are saved here.",
                target_element='[data-tutorial="wisdom"]',
                position=StepPosition.BOTTOM
            ),
        )
    ),
    Tutorial(
        tutorial_id="community-connection",
        title="Community Connection",
        description="Find your circle and grow together",
        category=TutorialCategory.FEATURE,
        estimated_minutes=7,
        steps=(
            TutorialStep(
                title="Finding Your Circle",
                body="Connect with others who share your values and growth journey.",
                target_element='[data-tutorial="circles"]',
                position=StepPosition.TOP
            ),
            TutorialStep(
                title="Meaningful Contribution",
                body="Share insights and support others."
            ),
            TutorialStep(
                title="Privacy & Boundaries",
                body="You control what you share. Everything is private by default."
            ),
            TutorialStep(
                title="Getting Support",
                body="When you're struggling, your circle is here."
            ),
        )
    ),
)

ONBOARDING_STEPS: Tuple[OnboardingStep, ...] = (
    OnboardingStep(
        index=0,
        title="Welcome to Your Growth Journey",
        description="Growth Halo works differently - we believe growth is cyclical, not linear."
    ),
    OnboardingStep(
        index=1,
        title="Meet Bliss, Your AI Companion",
        description="Bliss asks questions that help you see patterns you might miss on your own."
    ),
    OnboardingStep(
        index=VALUES_STEP_INDEX,
        title="Discover Your Core Values",
        description="What matters most to you? Choose 3 values to guide your journey.",
        gated=True
    ),
    OnboardingStep(
        index=3,
        title="Your Personal Dashboard",
        description="Track your growth phases, energy, and insights all in one place."
    ),
    OnboardingStep(
        index=4,
        title="You're Ready to Begin",
        description="Start with what feels right for you today."
    ),
)


def default_catalog() -> HintCatalog:
    """Catalog shipped with the application"""
    return HintCatalog(DEFAULT_HINTS, DEFAULT_TUTORIALS)
