"""Integration configurator — the cool-down period after a session."""

from __future__ import annotations

import random
from typing import Sequence

import structlog

from breath_guard.catalog.content import GROUNDING_SEQUENCE, INTEGRATION_TEXTS, MICRO_ACTIONS
from breath_guard.models import (
    Baseline,
    MicroAction,
    SessionContext,
    TimeOfDay,
    UserState,
)
from breath_guard.safety.models import IntegrationConfig

logger = structlog.get_logger(__name__)

BASE_SECONDS = 30
MODERATE_SECONDS = 45
EXTENDED_SECONDS = 60
FIRST_SESSIONS = 3
DEFAULT_TEXT_COUNT = 3

# Micro actions tied to a time of day are offered in these bands only.
_MICRO_ACTION_BANDS = {
    TimeOfDay.MORNING: {TimeOfDay.MORNING},
    TimeOfDay.AFTERNOON: set(),
    TimeOfDay.EVENING: {TimeOfDay.EVENING},
    TimeOfDay.NIGHT: {TimeOfDay.EVENING},
}


def integration_seconds(user_state: UserState, exercise_intensity: int) -> int:
    """Longest duration any applicable rule asks for."""
    if user_state.baseline == Baseline.OVERSTIMULATED:
        return EXTENDED_SECONDS

    candidates = [BASE_SECONDS]
    if exercise_intensity >= 3:
        candidates.append(MODERATE_SECONDS)
    if exercise_intensity >= 4:
        candidates.append(EXTENDED_SECONDS)
    if user_state.adaptive_flags.extend_integration:
        candidates.append(EXTENDED_SECONDS)
    if len(user_state.session_history) < FIRST_SESSIONS:
        candidates.append(MODERATE_SECONDS)
    return max(candidates)


def select_texts(
    user_state: UserState,
    rng: random.Random,
    count: int = DEFAULT_TEXT_COUNT,
    pool: Sequence[str] = INTEGRATION_TEXTS,
) -> list[str]:
    """Random phrases without replacement; a fixed sequence when overstimulated."""
    if user_state.baseline == Baseline.OVERSTIMULATED:
        return list(GROUNDING_SEQUENCE)
    return rng.sample(list(pool), min(count, len(pool)))


def select_micro_action(
    rng: random.Random,
    context: SessionContext | None = None,
    actions: Sequence[MicroAction] = MICRO_ACTIONS,
) -> MicroAction | None:
    """Pick an action suitable for the time of day (any-time actions always are)."""
    allowed = _MICRO_ACTION_BANDS[context.time_of_day] if context else set()
    eligible = [a for a in actions if a.time_of_day is None or a.time_of_day in allowed]
    return rng.choice(eligible) if eligible else None


def configure_integration(
    user_state: UserState,
    exercise_intensity: int,
    context: SessionContext | None = None,
    rng: random.Random | None = None,
    text_count: int = DEFAULT_TEXT_COUNT,
) -> IntegrationConfig:
    """Build the integration config.

    Text and micro-action choice is intentionally not idempotent; pass a
    seeded ``random.Random`` for reproducible output.
    """
    rng = rng or random.Random()
    show_micro_action = not (
        user_state.adaptive_flags.suggest_grounding
        or user_state.baseline == Baseline.OVERSTIMULATED
    )
    config = IntegrationConfig(
        duration_seconds=integration_seconds(user_state, exercise_intensity),
        texts=select_texts(user_state, rng, text_count),
        show_micro_action=show_micro_action,
        micro_action=select_micro_action(rng, context) if show_micro_action else None,
    )
    logger.debug(
        "integration.configured",
        user_id=user_state.id,
        duration_seconds=config.duration_seconds,
        show_micro_action=show_micro_action,
    )
    return config
