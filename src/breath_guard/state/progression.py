"""Capacity progression — how a capacity is trending and how far the next level is."""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel

from breath_guard.catalog.exercises import COHERENT_ID
from breath_guard.models import (
    CAPACITY_MAX,
    CapacityName,
    SessionFeedback,
    SessionRecord,
    UserState,
)
from breath_guard.state.outcomes import CAPACITY_INCREMENT

# The exercise whose sessions are taken as evidence for each capacity.
CAPACITY_EXERCISES = {
    CapacityName.CALM_BREATHING: COHERENT_ID,
    CapacityName.FOCUS_STABILITY: "box",
    CapacityName.ENERGY_REGULATION: "physiological-sigh",
    CapacityName.HOLD_TOLERANCE: "478",
}

_RELEVANT_SESSIONS = 10
_TREND_WINDOW = 3
_NEUTRAL_RATE = 0.5


class Trend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class CapacityProgression(BaseModel):
    capacity: CapacityName
    current: float
    target: float
    trend: Trend
    sessions_to_next_level: int | None  # None: no positive sessions to extrapolate from


def calculate_trend(sessions: list[SessionRecord]) -> Trend:
    if len(sessions) < _TREND_WINDOW:
        return Trend.STABLE
    recent = sessions[:_TREND_WINDOW]
    calmer = sum(1 for s in recent if s.feedback == SessionFeedback.CALMER)
    activated = sum(1 for s in recent if s.feedback == SessionFeedback.MORE_ACTIVATED)
    if calmer >= 2:
        return Trend.IMPROVING
    if activated >= 2:
        return Trend.DECLINING
    return Trend.STABLE


def positive_feedback_rate(sessions: list[SessionRecord]) -> float:
    if not sessions:
        return _NEUTRAL_RATE
    return sum(1 for s in sessions if s.feedback == SessionFeedback.CALMER) / len(sessions)


def calculate_capacity_progression(
    capacity: CapacityName,
    user_state: UserState,
    capacity_increment: float = CAPACITY_INCREMENT,
) -> CapacityProgression:
    exercise_id = CAPACITY_EXERCISES[capacity]
    sessions = [s for s in user_state.session_history if s.exercise_id == exercise_id]
    sessions = sessions[:_RELEVANT_SESSIONS]

    current = user_state.capacities.level(capacity)
    target = min(CAPACITY_MAX, current + 1)
    rate = positive_feedback_rate(sessions)

    if current >= CAPACITY_MAX:
        remaining: int | None = 0
    elif rate > 0:
        # round() strips float noise such as 0.9999999 sessions
        remaining = math.ceil(round((target - current) / (rate * capacity_increment), 6))
    else:
        remaining = None

    return CapacityProgression(
        capacity=capacity,
        current=current,
        target=target,
        trend=calculate_trend(sessions),
        sessions_to_next_level=remaining,
    )
