"""Local safety insights — is the engine working as intended for this user?

Computed from the stored session history only; nothing leaves the device.
"""

from __future__ import annotations

from pydantic import BaseModel

from breath_guard.models import SessionFeedback, UserState

# Healthy when completion > 70 %, negative feedback < 30 %, early exits < 20 %.
MIN_COMPLETION_RATE = 0.7
MAX_NEGATIVE_RATE = 0.3
MAX_EARLY_EXIT_RATE = 0.2


class SafetyInsights(BaseModel):
    total_sessions: int
    completion_rate: float
    negative_feedback_rate: float
    early_exit_rate: float
    is_healthy: bool


def calculate_safety_insights(user_state: UserState) -> SafetyInsights:
    history = user_state.session_history
    total = len(history)
    early_exits = sum(1 for s in history if s.was_early_exit)
    completed = total - early_exits
    negative = sum(
        1
        for s in history
        if not s.was_early_exit and s.feedback == SessionFeedback.MORE_ACTIVATED
    )

    completion_rate = completed / total if total else 0.0
    negative_rate = negative / completed if completed else 0.0
    early_exit_rate = early_exits / total if total else 0.0

    return SafetyInsights(
        total_sessions=total,
        completion_rate=completion_rate,
        negative_feedback_rate=negative_rate,
        early_exit_rate=early_exit_rate,
        is_healthy=(
            completion_rate > MIN_COMPLETION_RATE
            and negative_rate < MAX_NEGATIVE_RATE
            and early_exit_rate < MAX_EARLY_EXIT_RATE
        ),
    )
