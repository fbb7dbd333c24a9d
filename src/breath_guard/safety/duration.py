"""Duration engine — session length scaled by the same risk factors."""

from __future__ import annotations

import structlog

from breath_guard.models import (
    Baseline,
    Exercise,
    SessionContext,
    Sensitivity,
    TimeOfDay,
    UserState,
)
from breath_guard.safety.adaptation import round_half_up
from breath_guard.safety.models import DurationRecommendation

logger = structlog.get_logger(__name__)

FALLBACK_MINUTES = 3
MIN_MINUTES = 2
MIN_ROUNDS = 2

_BASELINE_MULTIPLIERS = {
    Baseline.OVERSTIMULATED: (0.6, "overstimulated baseline"),
    Baseline.STRESSED: (0.8, "stressed baseline"),
}
_HIGH_SENSITIVITY_MULTIPLIER = 0.8
_CAPACITY_BONUS_THRESHOLD = 3.0
_CAPACITY_BONUS_MULTIPLIER = 1.2
_NIGHT_MULTIPLIER = 0.8
_STREAK_BONUS_DAYS = 7
_STREAK_BONUS_MULTIPLIER = 1.1


def duration_factors(
    user_state: UserState, context: SessionContext | None = None
) -> list[tuple[float, str]]:
    """Return the ``(multiplier, label)`` pairs that apply, in evaluation order."""
    factors: list[tuple[float, str]] = []

    if user_state.baseline in _BASELINE_MULTIPLIERS:
        factors.append(_BASELINE_MULTIPLIERS[user_state.baseline])

    if user_state.sensitivity == Sensitivity.HIGH:
        factors.append((_HIGH_SENSITIVITY_MULTIPLIER, "high sensitivity"))

    capacities = user_state.capacities
    if (capacities.calm_breathing + capacities.focus_stability) / 2 > _CAPACITY_BONUS_THRESHOLD:
        factors.append((_CAPACITY_BONUS_MULTIPLIER, "higher capacity"))

    if context is not None:
        if context.time_of_day == TimeOfDay.NIGHT:
            factors.append((_NIGHT_MULTIPLIER, "nighttime"))
        if context.streak_days > _STREAK_BONUS_DAYS:
            factors.append((_STREAK_BONUS_MULTIPLIER, "practice streak"))

    return factors


def recommend_duration(
    exercise: Exercise,
    user_state: UserState,
    context: SessionContext | None = None,
) -> DurationRecommendation:
    """Scale the exercise's default length; never below 2 minutes / 2 rounds.

    Round-based exercises stay round-based.  An exercise with no default
    at all is treated as a 3-minute exercise.
    """
    factors = duration_factors(user_state, context)
    multiplier = 1.0
    for value, _label in factors:
        multiplier *= value
    reasoning = ", ".join(label for _value, label in factors) or "default"

    if exercise.default_rounds is not None:
        result = DurationRecommendation(
            rounds=max(MIN_ROUNDS, round_half_up(exercise.default_rounds * multiplier)),
            reasoning=reasoning,
        )
    else:
        base = exercise.default_minutes or FALLBACK_MINUTES
        result = DurationRecommendation(
            minutes=max(MIN_MINUTES, round_half_up(base * multiplier)),
            reasoning=reasoning,
        )

    logger.debug(
        "duration.recommended",
        exercise_id=exercise.id,
        multiplier=round(multiplier, 3),
        minutes=result.minutes,
        rounds=result.rounds,
    )
    return result
