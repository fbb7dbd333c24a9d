"""Session outcome updater — fold one session's feedback back into the profile."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog

from breath_guard.models import (
    AdaptiveFlags,
    Capacities,
    Exercise,
    SessionFeedback,
    SessionRecord,
    UserState,
    clamp_capacity,
)

logger = structlog.get_logger(__name__)

HISTORY_LIMIT = 100
CAPACITY_INCREMENT = 0.2


def adjust_for_feedback(
    capacities: Capacities,
    flags: AdaptiveFlags,
    exercise: Exercise,
    feedback: SessionFeedback,
    capacity_increment: float = CAPACITY_INCREMENT,
) -> tuple[Capacities, AdaptiveFlags]:
    """Return updated capacities and flags for a completed session.

    ``extend_integration`` and ``avoid_fast_breathing`` are never cleared
    here; only a calmer outcome relaxes ``reduce_intensity`` and
    ``suggest_grounding``.
    """
    if feedback == SessionFeedback.CALMER:
        capacities = capacities.model_copy(
            update={
                "calm_breathing": clamp_capacity(capacities.calm_breathing + capacity_increment)
            }
        )
        flags = flags.model_copy(update={"reduce_intensity": False, "suggest_grounding": False})
    elif feedback == SessionFeedback.MORE_ACTIVATED:
        update = {
            "reduce_intensity": True,
            "suggest_grounding": True,
            "extend_integration": True,
        }
        if exercise.safety.requires_fast_breathing_tolerance:
            update["avoid_fast_breathing"] = True
        flags = flags.model_copy(update=update)
    return capacities, flags


def apply_session_outcome(
    user_state: UserState,
    exercise: Exercise,
    duration_minutes: float,
    cycles: int,
    feedback: SessionFeedback | None,
    was_early_exit: bool,
    *,
    timestamp: datetime | None = None,
    record_id: str | None = None,
    history_limit: int = HISTORY_LIMIT,
    capacity_increment: float = CAPACITY_INCREMENT,
) -> tuple[UserState, SessionRecord]:
    """Record a session and return ``(new_state, record)``.

    An early exit is logged to history but never adjusts capacities or
    flags, whatever feedback accompanies it.  Contraindications are never
    touched.
    """
    record = SessionRecord(
        id=record_id or uuid.uuid4().hex,
        exercise_id=exercise.id,
        timestamp=timestamp or datetime.now(timezone.utc),
        duration_minutes=duration_minutes,
        completed_cycles=cycles,
        feedback=feedback,
        was_early_exit=was_early_exit,
    )

    capacities = user_state.capacities
    flags = user_state.adaptive_flags
    if not was_early_exit and feedback is not None:
        capacities, flags = adjust_for_feedback(
            capacities, flags, exercise, feedback, capacity_increment
        )

    new_state = user_state.model_copy(
        update={
            "capacities": capacities,
            "adaptive_flags": flags,
            "last_session_at": record.timestamp,
            "session_history": [record, *user_state.session_history][:history_limit],
        }
    )
    logger.info(
        "session.recorded",
        user_id=user_state.id,
        exercise_id=exercise.id,
        feedback=feedback.value if feedback else None,
        early_exit=was_early_exit,
        flags=flags.model_dump(),
    )
    return new_state, record
