"""Pydantic models for the safety engine's outputs.

These models represent:
- The tagged safety decision (allow / block / adapt)
- The legacy flat safety result kept for older callers
- Category listings, recommendations, durations and integration configs
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from breath_guard.models import BreathPattern, Exercise, MicroAction

# ── Enums ─────────────────────────────────────────────────────


class BlockReason(str, Enum):
    BREATH_HOLDS = "breath_holds"
    FAST_BREATHING = "fast_breathing"
    ADAPTIVE_BLOCK = "adaptive_block"
    INSUFFICIENT_CAPACITY = "insufficient_capacity"
    TOO_INTENSE_FOR_BASELINE = "too_intense_for_baseline"
    RECENT_NEGATIVE_EXPERIENCE = "recent_negative_experience"


class AdaptationType(str, Enum):
    REDUCED_HOLD_TOLERANCE = "reduced_hold_tolerance"
    HIGH_SENSITIVITY = "high_sensitivity"
    RECOVERY_MODE = "recovery_mode"


class DisplayStatus(str, Enum):
    """How a decision is presented in exercise listings."""

    AVAILABLE = "available"
    ADAPTED = "adapted"
    BLOCKED = "blocked"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Safety decision ───────────────────────────────────────────


class AllowDecision(_Frozen):
    type: Literal["allow"] = "allow"
    pattern: BreathPattern

    @property
    def display_status(self) -> DisplayStatus:
        return DisplayStatus.AVAILABLE


class BlockDecision(_Frozen):
    type: Literal["block"] = "block"
    reason: BlockReason
    alternative_id: str | None = None

    @property
    def display_status(self) -> DisplayStatus:
        return DisplayStatus.BLOCKED


class AdaptDecision(_Frozen):
    type: Literal["adapt"] = "adapt"
    adaptation: AdaptationType
    pattern: BreathPattern

    @property
    def display_status(self) -> DisplayStatus:
        return DisplayStatus.ADAPTED


SafetyDecision = Annotated[
    Union[AllowDecision, BlockDecision, AdaptDecision],
    Field(discriminator="type"),
]


class SafetyCheckResult(_Frozen):
    """Flat pre-union result shape: ``allowed`` plus optional details."""

    allowed: bool
    reason: str | None = None
    alternative_id: str | None = None
    adapted_pattern: BreathPattern | None = None


# ── Engine outputs ────────────────────────────────────────────


class CategoryEntry(_Frozen):
    """One exercise of a category listing together with its decision."""

    exercise: Exercise
    decision: SafetyDecision

    @property
    def display_status(self) -> DisplayStatus:
        return self.decision.display_status


class Recommendation(_Frozen):
    exercise: Exercise
    decision: SafetyDecision
    reasoning: str
    alternatives: list[Exercise] = Field(default_factory=list)


class DurationRecommendation(_Frozen):
    """Session length; exactly one of ``minutes`` / ``rounds`` is set."""

    minutes: int | None = None
    rounds: int | None = None
    reasoning: str = "default"


class IntegrationConfig(_Frozen):
    """Post-session cool-down configuration."""

    duration_seconds: int = Field(ge=0)
    texts: list[str] = Field(default_factory=list)
    show_micro_action: bool = True
    micro_action: MicroAction | None = None
