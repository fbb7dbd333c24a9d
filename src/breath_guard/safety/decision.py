"""Safety decision function — is this exercise right for this user, right now?

:func:`decide` walks a strict precedence chain and returns on the first rule
that matches:

==  =============================================  =========================
#   Rule                                           Outcome
==  =============================================  =========================
1   breath-hold contraindication                   block ``breath_holds``
2   fast-breathing contraindication                block ``fast_breathing``
3   learned fast-breathing avoidance               block ``adaptive_block``
4   ≥2 consecutive negative sessions, intensity>2  block ``recent_negative…``
5   hold tolerance below minimum                   adapt (shorter holds)
6   other capacity below minimum                   block ``insufficient…``
7   baseline intensity ceiling                     block ``too_intense…``
8   high sensitivity                               adapt (capped phases)
9   recovery flag, intensity>2                     adapt (reduced holds)
10  otherwise                                      allow
==  =============================================  =========================

Blocking or adapting is a normal result, never an exception.
"""

from __future__ import annotations

import structlog

from breath_guard.catalog.exercises import COHERENT_ID, TRAUMA_SAFE_ID
from breath_guard.catalog.registry import ExerciseCatalog, default_catalog
from breath_guard.models import (
    Baseline,
    CapacityName,
    Contraindication,
    Exercise,
    ExerciseCategory,
    SessionContext,
    Sensitivity,
    UserState,
)
from breath_guard.safety.adaptation import (
    adapt_pattern_for_high_sensitivity,
    adapt_pattern_for_low_hold_tolerance,
    reduce_pattern_intensity,
)
from breath_guard.safety.models import (
    AdaptationType,
    AdaptDecision,
    AllowDecision,
    BlockDecision,
    BlockReason,
    CategoryEntry,
    DisplayStatus,
    SafetyCheckResult,
    SafetyDecision,
)

logger = structlog.get_logger(__name__)

NEGATIVE_STREAK_LIMIT = 2

# Capacities that block when unmet; hold tolerance adapts instead.
_BLOCKING_CAPACITIES = (
    CapacityName.CALM_BREATHING,
    CapacityName.FOCUS_STABILITY,
    CapacityName.ENERGY_REGULATION,
)

_CONTRAINDICATION_REASONS = {
    Contraindication.BREATH_HOLDS: BlockReason.BREATH_HOLDS,
    Contraindication.FAST_BREATHING: BlockReason.FAST_BREATHING,
}

_STATUS_ORDER = {
    DisplayStatus.AVAILABLE: 0,
    DisplayStatus.ADAPTED: 1,
    DisplayStatus.BLOCKED: 2,
}


def decide(
    exercise: Exercise,
    user_state: UserState,
    context: SessionContext | None = None,
) -> SafetyDecision:
    """Return the safety decision for *exercise* against *user_state*."""
    decision = _evaluate(exercise, user_state, context)
    logger.debug(
        "safety.decision",
        exercise_id=exercise.id,
        user_id=user_state.id,
        outcome=decision.type,
        detail=_detail(decision),
    )
    return decision


def _evaluate(
    exercise: Exercise,
    user_state: UserState,
    context: SessionContext | None,
) -> SafetyDecision:
    safety = exercise.safety
    flags = user_state.adaptive_flags
    capacities = user_state.capacities
    alternative = safety.trauma_safe_alternative_id

    # 1–2. Hard contraindications, never overridden
    for contraindication, reason in _CONTRAINDICATION_REASONS.items():
        if safety.trips(contraindication) and user_state.contraindications.has(contraindication):
            return BlockDecision(reason=reason, alternative_id=alternative)

    # 3. Learned from the user's own history
    if flags.avoid_fast_breathing and safety.requires_fast_breathing_tolerance:
        return BlockDecision(reason=BlockReason.ADAPTIVE_BLOCK, alternative_id=alternative)

    # 4. Recent negative experiences
    if (
        context is not None
        and context.consecutive_negative_experiences >= NEGATIVE_STREAK_LIMIT
        and safety.max_intensity > 2
    ):
        return BlockDecision(
            reason=BlockReason.RECENT_NEGATIVE_EXPERIENCE,
            alternative_id=TRAUMA_SAFE_ID,
        )

    # 5. Low hold tolerance degrades gracefully; sensitivity caps still apply
    required_hold = safety.minimum_capacity.get(CapacityName.HOLD_TOLERANCE)
    if required_hold is not None and capacities.hold_tolerance < required_hold:
        pattern = adapt_pattern_for_low_hold_tolerance(exercise.pattern, capacities.hold_tolerance)
        if user_state.sensitivity == Sensitivity.HIGH:
            pattern = adapt_pattern_for_high_sensitivity(pattern)
        return AdaptDecision(adaptation=AdaptationType.REDUCED_HOLD_TOLERANCE, pattern=pattern)

    # 6. Remaining capacities have no adaptation path
    for name in _BLOCKING_CAPACITIES:
        required = safety.minimum_capacity.get(name)
        if required is not None and capacities.level(name) < required:
            return BlockDecision(
                reason=BlockReason.INSUFFICIENT_CAPACITY, alternative_id=alternative
            )

    # 7. Baseline intensity ceiling
    if user_state.baseline == Baseline.OVERSTIMULATED and safety.max_intensity > 2:
        return BlockDecision(
            reason=BlockReason.TOO_INTENSE_FOR_BASELINE,
            alternative_id=alternative or COHERENT_ID,
        )
    if user_state.baseline == Baseline.STRESSED and safety.max_intensity > 3:
        return BlockDecision(
            reason=BlockReason.TOO_INTENSE_FOR_BASELINE, alternative_id=alternative
        )

    # 8. Sensitivity
    if user_state.sensitivity == Sensitivity.HIGH:
        return AdaptDecision(
            adaptation=AdaptationType.HIGH_SENSITIVITY,
            pattern=adapt_pattern_for_high_sensitivity(exercise.pattern),
        )

    # 9. Recovery mode
    if flags.reduce_intensity and safety.max_intensity > 2:
        return AdaptDecision(
            adaptation=AdaptationType.RECOVERY_MODE,
            pattern=reduce_pattern_intensity(exercise.pattern),
        )

    # 10. Safe as-is
    return AllowDecision(pattern=exercise.pattern)


def _detail(decision: SafetyDecision) -> str | None:
    if isinstance(decision, BlockDecision):
        return decision.reason.value
    if isinstance(decision, AdaptDecision):
        return decision.adaptation.value
    return None


# ── Category listing ──────────────────────────────────────────


def evaluate_category(
    category: ExerciseCategory,
    user_state: UserState,
    context: SessionContext | None = None,
    catalog: ExerciseCatalog | None = None,
) -> list[CategoryEntry]:
    """Decide every exercise in *category*.

    Sorted available → adapted → blocked, then by ascending intensity;
    catalog order breaks remaining ties.
    """
    catalog = catalog or default_catalog()
    entries = [
        CategoryEntry(exercise=exercise, decision=decide(exercise, user_state, context))
        for exercise in catalog.by_category(category)
    ]
    return sorted(
        entries,
        key=lambda e: (_STATUS_ORDER[e.display_status], e.exercise.safety.max_intensity),
    )


# ── Legacy result shape ───────────────────────────────────────

_LEGACY_ADAPTATION_REASONS = {
    AdaptationType.REDUCED_HOLD_TOLERANCE: "adapted_pattern",
    AdaptationType.HIGH_SENSITIVITY: "adapted_for_sensitivity",
    AdaptationType.RECOVERY_MODE: "adapted_for_recovery",
}


def to_legacy_result(decision: SafetyDecision) -> SafetyCheckResult:
    """Flatten a decision into the older ``allowed``/``reason`` record."""
    if isinstance(decision, BlockDecision):
        return SafetyCheckResult(
            allowed=False,
            reason=decision.reason.value,
            alternative_id=decision.alternative_id,
        )
    if isinstance(decision, AdaptDecision):
        return SafetyCheckResult(
            allowed=True,
            reason=_LEGACY_ADAPTATION_REASONS[decision.adaptation],
            adapted_pattern=decision.pattern,
        )
    return SafetyCheckResult(allowed=True)
