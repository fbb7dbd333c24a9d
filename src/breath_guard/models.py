"""Shared Pydantic models: exercise catalog entries and the user profile.

Every model here is frozen.  A profile is treated as an immutable snapshot;
updates go through ``model_copy(update=...)`` so a snapshot handed to the
decision functions can never change underneath them.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ── Enums ─────────────────────────────────────────────────────


class Baseline(str, Enum):
    """Self-reported everyday nervous-system arousal tendency."""

    CALM = "calm"
    NEUTRAL = "neutral"
    STRESSED = "stressed"
    OVERSTIMULATED = "overstimulated"


class Sensitivity(str, Enum):
    """How strongly the user reacts to breathwork intensity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExerciseCategory(str, Enum):
    CALMING = "calming"
    FOCUS = "focus"
    ENERGY = "energy"


class CapacityName(str, Enum):
    """Internal skill dimensions.  Values match :class:`Capacities` fields."""

    CALM_BREATHING = "calm_breathing"
    FOCUS_STABILITY = "focus_stability"
    ENERGY_REGULATION = "energy_regulation"
    HOLD_TOLERANCE = "hold_tolerance"


class Contraindication(str, Enum):
    """Hard-stop restrictions.  Values match :class:`Contraindications` fields."""

    BREATH_HOLDS = "breath_holds"
    FAST_BREATHING = "fast_breathing"


class SessionFeedback(str, Enum):
    CALMER = "calmer"
    SAME = "same"
    MORE_ACTIVATED = "more_activated"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Breath pattern & exercise ─────────────────────────────────

CAPACITY_MIN = 1.0
CAPACITY_MAX = 5.0


def clamp_capacity(value: float) -> float:
    """Clamp a capacity level into [1, 5].

    Rounded to two decimals so repeated 0.2 increments land on clean
    values (2.2, 2.4, ...) instead of accumulating float noise.
    """
    return round(min(CAPACITY_MAX, max(CAPACITY_MIN, value)), 2)


class BreathPattern(_Frozen):
    """Four-phase timing of one breathing cycle, in seconds."""

    inhale: float = Field(ge=0.0)
    hold_in: float = Field(0.0, ge=0.0)
    exhale: float = Field(ge=0.0)
    hold_out: float = Field(0.0, ge=0.0)

    @model_validator(mode="after")
    def _not_empty(self) -> BreathPattern:
        if self.cycle_seconds <= 0:
            raise ValueError("a breath pattern needs at least one non-zero phase")
        return self

    @property
    def cycle_seconds(self) -> float:
        return self.inhale + self.hold_in + self.exhale + self.hold_out

    @property
    def has_holds(self) -> bool:
        return self.hold_in > 0 or self.hold_out > 0


class ExerciseSafety(_Frozen):
    """Safety profile declared by every exercise."""

    max_intensity: int = Field(ge=1, le=5)
    requires_hold_tolerance: bool = False
    requires_fast_breathing_tolerance: bool = False
    minimum_capacity: dict[CapacityName, float] = Field(default_factory=dict)
    trauma_safe_alternative_id: str | None = None
    contraindicated: frozenset[Contraindication] = frozenset()

    def trips(self, contraindication: Contraindication) -> bool:
        return contraindication in self.contraindicated


class Guidance(_Frozen):
    start: str | None = None
    mid: str | None = None
    end: str | None = None


class Exercise(_Frozen):
    """Immutable catalog entry."""

    id: str = Field(min_length=1)
    name: str
    category: ExerciseCategory
    short_description: str = ""
    description: str = ""
    pattern: BreathPattern
    safety: ExerciseSafety
    default_minutes: int | None = Field(None, ge=1)
    default_rounds: int | None = Field(None, ge=1)
    guidance: Guidance = Field(default_factory=Guidance)
    created_by: str = "system"

    @model_validator(mode="after")
    def _check_shape(self) -> Exercise:
        if self.default_minutes is not None and self.default_rounds is not None:
            raise ValueError(
                f"exercise {self.id!r} sets both default_minutes and default_rounds"
            )
        # Adaptations only shrink holds, so these keep every adapted cycle viable.
        if self.pattern.inhale <= 0 or self.pattern.exhale <= 0:
            raise ValueError(f"exercise {self.id!r} needs a positive inhale and exhale")
        return self

    @property
    def is_round_based(self) -> bool:
        return self.default_rounds is not None


class MicroAction(_Frozen):
    """A small suggested follow-up task shown after integration."""

    id: str
    text: str
    time_of_day: TimeOfDay | None = None  # None means any time


# ── User profile ──────────────────────────────────────────────


class Contraindications(_Frozen):
    """Declared once during onboarding; never revised by session feedback."""

    breath_holds: bool = False
    fast_breathing: bool = False

    def has(self, contraindication: Contraindication) -> bool:
        return bool(getattr(self, contraindication.value))


class Capacities(_Frozen):
    """Invisible skill levels, nominally 1–5, fractional internally."""

    calm_breathing: float = Field(2.0, ge=CAPACITY_MIN, le=CAPACITY_MAX)
    focus_stability: float = Field(2.0, ge=CAPACITY_MIN, le=CAPACITY_MAX)
    energy_regulation: float = Field(2.0, ge=CAPACITY_MIN, le=CAPACITY_MAX)
    hold_tolerance: float = Field(2.0, ge=CAPACITY_MIN, le=CAPACITY_MAX)

    def level(self, name: CapacityName) -> float:
        return float(getattr(self, name.value))

    def lowest(self) -> CapacityName:
        """Lowest-scoring dimension; ties go to the earlier field."""
        return min(CapacityName, key=self.level)


class AdaptiveFlags(_Frozen):
    """Temporary protective state derived from recent session feedback."""

    avoid_fast_breathing: bool = False
    reduce_intensity: bool = False
    suggest_grounding: bool = False
    extend_integration: bool = False


class SessionRecord(_Frozen):
    """One completed or aborted session.  Created once, never mutated."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    exercise_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_minutes: float = Field(ge=0.0)
    completed_cycles: int = Field(ge=0)
    feedback: SessionFeedback | None = None
    was_early_exit: bool = False


class UserState(_Frozen):
    """Aggregate root of everything the engine knows about one user."""

    id: str
    onboarding_completed: bool = False
    baseline: Baseline = Baseline.NEUTRAL
    sensitivity: Sensitivity = Sensitivity.MEDIUM
    contraindications: Contraindications = Field(default_factory=Contraindications)
    capacities: Capacities = Field(default_factory=Capacities)
    adaptive_flags: AdaptiveFlags = Field(default_factory=AdaptiveFlags)
    current_day_in_program: int = Field(1, ge=1)
    last_session_at: datetime | None = None
    session_history: list[SessionRecord] = Field(default_factory=list)


def default_user_state(user_id: str | None = None) -> UserState:
    """Profile created on first launch, before onboarding."""
    return UserState(id=user_id or uuid.uuid4().hex)


class SessionContext(_Frozen):
    """Optional situational input, derived from the profile's history."""

    time_of_day: TimeOfDay = TimeOfDay.AFTERNOON
    days_since_last_session: int | None = None
    recent_feedback: SessionFeedback | None = None
    consecutive_negative_experiences: int = Field(0, ge=0)
    streak_days: int = Field(0, ge=0)


# ── Onboarding ────────────────────────────────────────────────


class OnboardingEffects(_Frozen):
    """Partial profile changes declared by one onboarding answer."""

    baseline: Baseline | None = None
    sensitivity: Sensitivity | None = None
    contraindications: dict[Contraindication, bool] = Field(default_factory=dict)
    capacities: dict[CapacityName, float] = Field(default_factory=dict)


class OnboardingOption(_Frozen):
    id: str
    label: str
    effects: OnboardingEffects = Field(default_factory=OnboardingEffects)


class OnboardingQuestion(_Frozen):
    id: str
    question: str
    subtext: str = ""
    options: list[OnboardingOption]

    def option(self, option_id: str) -> OnboardingOption | None:
        return next((o for o in self.options if o.id == option_id), None)
