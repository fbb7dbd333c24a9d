"""Recommendation engine — pick the best exercise for a user right now.

Priority order (first match wins):

1. **Grounding** — overstimulated baseline or ``suggest_grounding`` flag:
   always the trauma-safe exercise.
2. **Recovery** — ``reduce_intensity`` flag: lowest-intensity calming
   exercises that survive the safety check.
3. **Progressive challenge** — a calming exercise that exercises the user's
   weakest capacity, else the first safe one.
4. **Fallback** — coherent breathing.

A blocked decision is never returned as the primary pick.
"""

from __future__ import annotations

import structlog

from breath_guard.catalog.exercises import COHERENT_ID, TRAUMA_SAFE_ID
from breath_guard.catalog.registry import (
    ExerciseCatalog,
    ExerciseNotFoundError,
    default_catalog,
)
from breath_guard.models import (
    Baseline,
    Exercise,
    ExerciseCategory,
    SessionContext,
    UserState,
)
from breath_guard.safety.decision import evaluate_category
from breath_guard.safety.models import AllowDecision, CategoryEntry, DisplayStatus, Recommendation

logger = structlog.get_logger(__name__)

LOW_INTENSITY_CEILING = 2
MAX_ALTERNATIVES = 2


def recommend(
    user_state: UserState,
    context: SessionContext | None = None,
    catalog: ExerciseCatalog | None = None,
) -> Recommendation:
    """Return the recommended exercise, its decision and up to two alternatives."""
    catalog = catalog or default_catalog()
    flags = user_state.adaptive_flags

    # 1. Grounding
    if user_state.baseline == Baseline.OVERSTIMULATED or flags.suggest_grounding:
        try:
            trauma_safe = catalog.get(TRAUMA_SAFE_ID)
        except ExerciseNotFoundError:
            logger.warning("recommendation.trauma_safe_missing", user_id=user_state.id)
            return _fallback(user_state, catalog)
        return _as_is(
            trauma_safe,
            "Nervous system needs grounding - trauma-safe exercise prioritized",
            alternatives=_low_intensity_calming(catalog, exclude=trauma_safe.id),
        )

    # 2. Recovery
    if flags.reduce_intensity:
        candidates = [
            entry
            for entry in _safe_calming(user_state, context, catalog)
            if entry.exercise.safety.max_intensity <= LOW_INTENSITY_CEILING
        ]
        if candidates:
            return _pick(candidates, candidates[0], "Recovery mode - low intensity exercise selected")

    # 3. Progressive challenge
    candidates = _safe_calming(user_state, context, catalog)
    if candidates:
        target = user_state.capacities.lowest()
        selected = next(
            (c for c in candidates if target in c.exercise.safety.minimum_capacity),
            candidates[0],
        )
        return _pick(candidates, selected, f"Progressive challenge targeting {target.value}")

    # 4. Fallback
    return _fallback(user_state, catalog)


# ── Internals ─────────────────────────────────────────────────


def _safe_calming(
    user_state: UserState,
    context: SessionContext | None,
    catalog: ExerciseCatalog,
) -> list[CategoryEntry]:
    return [
        entry
        for entry in evaluate_category(ExerciseCategory.CALMING, user_state, context, catalog)
        if entry.display_status != DisplayStatus.BLOCKED
    ]


def _pick(candidates: list[CategoryEntry], selected: CategoryEntry, reasoning: str) -> Recommendation:
    others = [c.exercise for c in candidates if c is not selected]
    return Recommendation(
        exercise=selected.exercise,
        decision=selected.decision,
        reasoning=reasoning,
        alternatives=others[:MAX_ALTERNATIVES],
    )


def _fallback(user_state: UserState, catalog: ExerciseCatalog) -> Recommendation:
    logger.info("recommendation.fallback", user_id=user_state.id)
    return _as_is(catalog.get(COHERENT_ID), "Fallback to safe default")


def _as_is(
    exercise: Exercise, reasoning: str, alternatives: list[Exercise] | None = None
) -> Recommendation:
    return Recommendation(
        exercise=exercise,
        decision=AllowDecision(pattern=exercise.pattern),
        reasoning=reasoning,
        alternatives=alternatives or [],
    )


def _low_intensity_calming(catalog: ExerciseCatalog, exclude: str) -> list[Exercise]:
    return [
        e
        for e in catalog.by_category(ExerciseCategory.CALMING)
        if e.id != exclude and e.safety.max_intensity <= LOW_INTENSITY_CEILING
    ][:MAX_ALTERNATIVES]
