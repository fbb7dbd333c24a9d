"""Profile state — session outcomes, context, progression, insights and the store."""

from breath_guard.state.context import build_session_context
from breath_guard.state.insights import SafetyInsights, calculate_safety_insights
from breath_guard.state.outcomes import apply_session_outcome
from breath_guard.state.progression import CapacityProgression, calculate_capacity_progression
from breath_guard.state.store import ProfileStore

__all__ = [
    "CapacityProgression",
    "ProfileStore",
    "SafetyInsights",
    "apply_session_outcome",
    "build_session_context",
    "calculate_capacity_progression",
    "calculate_safety_insights",
]
