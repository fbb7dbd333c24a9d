"""SafetyEngine — one object bundling the catalog and random source.

The module-level functions stay usable on their own; the engine just saves
callers from threading the catalog and rng through every call.
"""

from __future__ import annotations

import random

from breath_guard.catalog.registry import ExerciseCatalog, default_catalog
from breath_guard.config import Settings, get_settings
from breath_guard.models import Exercise, ExerciseCategory, SessionContext, UserState
from breath_guard.safety.decision import decide, evaluate_category
from breath_guard.safety.duration import recommend_duration
from breath_guard.safety.integration import DEFAULT_TEXT_COUNT, configure_integration
from breath_guard.safety.models import (
    CategoryEntry,
    DurationRecommendation,
    IntegrationConfig,
    Recommendation,
    SafetyDecision,
)
from breath_guard.safety.recommendation import recommend


class SafetyEngine:
    """Stateless over profiles: every call takes the current snapshot."""

    def __init__(
        self,
        catalog: ExerciseCatalog | None = None,
        rng: random.Random | None = None,
        text_count: int = DEFAULT_TEXT_COUNT,
    ) -> None:
        self.catalog = catalog or default_catalog()
        self._rng = rng or random.Random()
        self._text_count = text_count

    def decide(
        self,
        exercise: Exercise | str,
        user_state: UserState,
        context: SessionContext | None = None,
    ) -> SafetyDecision:
        """Decide by exercise object or catalog id (unknown ids raise)."""
        if isinstance(exercise, str):
            exercise = self.catalog.get(exercise)
        return decide(exercise, user_state, context)

    def evaluate_category(
        self,
        category: ExerciseCategory,
        user_state: UserState,
        context: SessionContext | None = None,
    ) -> list[CategoryEntry]:
        return evaluate_category(category, user_state, context, self.catalog)

    def recommend(
        self, user_state: UserState, context: SessionContext | None = None
    ) -> Recommendation:
        return recommend(user_state, context, self.catalog)

    def recommend_duration(
        self,
        exercise: Exercise,
        user_state: UserState,
        context: SessionContext | None = None,
    ) -> DurationRecommendation:
        return recommend_duration(exercise, user_state, context)

    def configure_integration(
        self,
        user_state: UserState,
        exercise_intensity: int,
        context: SessionContext | None = None,
    ) -> IntegrationConfig:
        return configure_integration(
            user_state,
            exercise_intensity,
            context,
            rng=self._rng,
            text_count=self._text_count,
        )


def create_safety_engine(settings: Settings | None = None) -> SafetyEngine:
    """Factory wiring the built-in catalog and a settings-seeded rng."""
    settings = settings or get_settings()
    return SafetyEngine(
        catalog=default_catalog(),
        rng=random.Random(settings.random_seed),
        text_count=settings.integration_text_count,
    )
