"""Tests for the safety decision function and category listings."""

from __future__ import annotations

import itertools

import pytest

from breath_guard.catalog import ExerciseCatalog
from breath_guard.models import (
    Baseline,
    ExerciseCategory,
    SessionContext,
    Sensitivity,
)
from breath_guard.safety import (
    AdaptationType,
    AdaptDecision,
    AllowDecision,
    BlockDecision,
    BlockReason,
    DisplayStatus,
    decide,
    evaluate_category,
    to_legacy_result,
)

from tests.factories import make_exercise, make_state


def _phases(decision) -> tuple[float, float, float, float]:
    p = decision.pattern
    return (p.inhale, p.hold_in, p.exhale, p.hold_out)


# ── Contraindications ─────────────────────────────────────────


class TestContraindications:
    def test_breath_hold_contraindication_blocks_478(self, exercise):
        state = make_state(contraindications={"breath_holds": True})
        decision = decide(exercise("478"), state)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.BREATH_HOLDS
        assert decision.alternative_id == "extended-exhale"

    def test_fast_breathing_contraindication(self):
        fast = make_exercise(
            "fire",
            category=ExerciseCategory.ENERGY,
            pattern=(1, 0, 1, 0),
            max_intensity=4,
            requires_fast_breathing_tolerance=True,
            contraindicated=frozenset({"fast_breathing"}),
            trauma_safe_alternative_id="coherent",
        )
        state = make_state(contraindications={"fast_breathing": True})
        decision = decide(fast, state)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.FAST_BREATHING
        assert decision.alternative_id == "coherent"

    def test_contraindication_beats_every_later_rule(self, exercise):
        state = make_state(
            contraindications={"breath_holds": True},
            capacities={"hold_tolerance": 1},
            sensitivity=Sensitivity.HIGH,
        )
        decision = decide(exercise("box"), state)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.BREATH_HOLDS

    def test_contraindication_ignored_when_exercise_not_affected(self, exercise):
        state = make_state(contraindications={"breath_holds": True, "fast_breathing": True})
        assert isinstance(decide(exercise("coherent"), state), AllowDecision)

    def test_contraindication_blocks_across_all_profiles(self, exercise):
        # No combination of other profile fields lifts a hard contraindication.
        for baseline, sensitivity, reduce in itertools.product(
            Baseline, Sensitivity, (False, True)
        ):
            state = make_state(
                baseline=baseline,
                sensitivity=sensitivity,
                contraindications={"breath_holds": True},
                capacities={"hold_tolerance": 5},
                adaptive_flags={"reduce_intensity": reduce},
            )
            for exercise_id in ("478", "box"):
                decision = decide(exercise(exercise_id), state)
                assert decision.type == "block"
                assert decision.reason == BlockReason.BREATH_HOLDS


# ── Learned and situational blocks ────────────────────────────


class TestAdaptiveBlocks:
    def test_learned_fast_breathing_avoidance(self):
        fast = make_exercise(
            "fire", pattern=(1, 0, 1, 0), max_intensity=2, requires_fast_breathing_tolerance=True
        )
        state = make_state(adaptive_flags={"avoid_fast_breathing": True})
        decision = decide(fast, state)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.ADAPTIVE_BLOCK

    def test_avoidance_flag_ignored_for_slow_exercises(self, exercise):
        state = make_state(adaptive_flags={"avoid_fast_breathing": True})
        assert isinstance(decide(exercise("coherent"), state), AllowDecision)

    def test_recent_negatives_block_intense_exercise(self):
        intense = make_exercise("intense", max_intensity=3)
        context = SessionContext(consecutive_negative_experiences=2)
        decision = decide(intense, make_state(), context)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.RECENT_NEGATIVE_EXPERIENCE
        assert decision.alternative_id == "trauma-safe"

    def test_recent_negatives_spare_gentle_exercise(self, exercise):
        context = SessionContext(consecutive_negative_experiences=4)
        assert not isinstance(decide(exercise("478"), make_state(), context), BlockDecision)

    def test_single_negative_is_not_enough(self):
        intense = make_exercise("intense", max_intensity=3)
        context = SessionContext(consecutive_negative_experiences=1)
        assert isinstance(decide(intense, make_state(), context), AllowDecision)


# ── Capacities ────────────────────────────────────────────────


class TestCapacities:
    def test_low_hold_tolerance_adapts_478(self, exercise):
        state = make_state(capacities={"hold_tolerance": 1})
        decision = decide(exercise("478"), state)
        assert isinstance(decision, AdaptDecision)
        assert decision.adaptation == AdaptationType.REDUCED_HOLD_TOLERANCE
        assert _phases(decision) == (4, 2, 8, 0)

    def test_hold_tolerance_adapts_before_capacity_block(self, exercise):
        state = make_state(capacities={"hold_tolerance": 1, "focus_stability": 1})
        decision = decide(exercise("box"), state)
        assert isinstance(decision, AdaptDecision)
        assert decision.adaptation == AdaptationType.REDUCED_HOLD_TOLERANCE

    def test_insufficient_focus_blocks_box(self, exercise):
        state = make_state(capacities={"focus_stability": 1})
        decision = decide(exercise("box"), state)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.INSUFFICIENT_CAPACITY
        assert decision.alternative_id == "coherent"

    def test_insufficient_energy_regulation_blocks(self):
        ex = make_exercise("energising", minimum_capacity={"energy_regulation": 3})
        decision = decide(ex, make_state())
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.INSUFFICIENT_CAPACITY

    def test_exact_minimum_is_enough(self, exercise):
        state = make_state(capacities={"hold_tolerance": 2, "focus_stability": 2})
        assert isinstance(decide(exercise("box"), state), AllowDecision)


# ── Baseline ceiling ──────────────────────────────────────────


class TestBaselineCeiling:
    def test_overstimulated_blocks_above_two(self):
        ex = make_exercise("moderate", max_intensity=3)
        decision = decide(ex, make_state(baseline=Baseline.OVERSTIMULATED))
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.TOO_INTENSE_FOR_BASELINE
        assert decision.alternative_id == "coherent"

    def test_overstimulated_keeps_declared_alternative(self):
        ex = make_exercise("moderate", max_intensity=3, trauma_safe_alternative_id="trauma-safe")
        decision = decide(ex, make_state(baseline=Baseline.OVERSTIMULATED))
        assert decision.alternative_id == "trauma-safe"

    def test_overstimulated_allows_intensity_two(self, exercise):
        state = make_state(baseline=Baseline.OVERSTIMULATED)
        assert isinstance(decide(exercise("478"), state), AllowDecision)

    def test_stressed_blocks_above_three(self):
        state = make_state(baseline=Baseline.STRESSED)
        decision = decide(make_exercise("strong", max_intensity=4), state)
        assert isinstance(decision, BlockDecision)
        assert decision.reason == BlockReason.TOO_INTENSE_FOR_BASELINE
        assert decision.alternative_id is None
        assert isinstance(decide(make_exercise("moderate", max_intensity=3), state), AllowDecision)


# ── Adaptations ───────────────────────────────────────────────


class TestAdaptations:
    def test_high_sensitivity_caps_box(self, exercise):
        decision = decide(exercise("box"), make_state(sensitivity=Sensitivity.HIGH))
        assert isinstance(decision, AdaptDecision)
        assert decision.adaptation == AdaptationType.HIGH_SENSITIVITY
        assert _phases(decision) == (4, 2, 4, 1)

    def test_high_sensitivity_applies_even_without_holds(self, exercise):
        decision = decide(exercise("coherent"), make_state(sensitivity=Sensitivity.HIGH))
        assert isinstance(decision, AdaptDecision)
        assert _phases(decision) == (4, 0, 5, 0)

    def test_recovery_mode_reduces_holds(self):
        ex = make_exercise("moderate", max_intensity=3, pattern=(4, 7, 8, 4))
        state = make_state(adaptive_flags={"reduce_intensity": True})
        decision = decide(ex, state)
        assert isinstance(decision, AdaptDecision)
        assert decision.adaptation == AdaptationType.RECOVERY_MODE
        assert _phases(decision) == (4, 4, 8, 2)

    def test_recovery_mode_skips_gentle_exercises(self, exercise):
        state = make_state(adaptive_flags={"reduce_intensity": True})
        assert isinstance(decide(exercise("478"), state), AllowDecision)

    def test_sensitivity_wins_over_recovery(self):
        ex = make_exercise("moderate", max_intensity=3, pattern=(4, 7, 8, 4))
        state = make_state(sensitivity=Sensitivity.HIGH, adaptive_flags={"reduce_intensity": True})
        assert decide(ex, state).adaptation == AdaptationType.HIGH_SENSITIVITY

    def test_low_hold_tolerance_keeps_sensitivity_caps(self, exercise):
        state = make_state(capacities={"hold_tolerance": 1.9}, sensitivity=Sensitivity.HIGH)
        decision = decide(exercise("478"), state)
        assert isinstance(decision, AdaptDecision)
        assert decision.adaptation == AdaptationType.REDUCED_HOLD_TOLERANCE
        assert _phases(decision) == (4, 2, 6, 0)

    def test_high_sensitivity_caps_hold_across_tolerances(self, catalog):
        tolerances = [round(1 + i / 10, 1) for i in range(41)]
        for exercise, hold in itertools.product(catalog, tolerances):
            state = make_state(capacities={"hold_tolerance": hold}, sensitivity=Sensitivity.HIGH)
            decision = decide(exercise, state)
            if isinstance(decision, AdaptDecision):
                inhale, hold_in, exhale, hold_out = _phases(decision)
                assert inhale <= 4, (exercise.id, hold)
                assert hold_in <= 2, (exercise.id, hold)
                assert exhale <= 6, (exercise.id, hold)
                assert hold_out <= 1, (exercise.id, hold)

    def test_adapted_pattern_never_longer_than_original(self, catalog):
        for exercise, hold, sensitivity in itertools.product(
            catalog, (1.0, 1.5, 2.0, 4.0), Sensitivity
        ):
            state = make_state(capacities={"hold_tolerance": hold}, sensitivity=sensitivity)
            decision = decide(exercise, state)
            if isinstance(decision, AdaptDecision):
                assert decision.pattern.hold_in <= exercise.pattern.hold_in
                assert decision.pattern.hold_out <= exercise.pattern.hold_out
                assert decision.pattern.inhale > 0
                assert decision.pattern.exhale > 0


class TestAllow:
    def test_default_profile_allows_builtins(self, catalog):
        for exercise in catalog:
            decision = decide(exercise, make_state())
            assert isinstance(decision, AllowDecision)
            assert decision.pattern == exercise.pattern

    def test_decision_is_deterministic(self, exercise):
        state = make_state(sensitivity=Sensitivity.HIGH)
        context = SessionContext(consecutive_negative_experiences=1)
        assert decide(exercise("box"), state, context) == decide(exercise("box"), state, context)


# ── Category listing ──────────────────────────────────────────


class TestEvaluateCategory:
    def test_sorted_by_status_then_intensity(self):
        catalog = ExerciseCatalog(
            [
                make_exercise("blocked", max_intensity=1, contraindicated=frozenset({"breath_holds"})),
                make_exercise("adapted", max_intensity=2, minimum_capacity={"hold_tolerance": 3}),
                make_exercise("allowed-2", max_intensity=2),
                make_exercise("allowed-1", max_intensity=1),
            ]
        )
        state = make_state(contraindications={"breath_holds": True})
        entries = evaluate_category(ExerciseCategory.CALMING, state, catalog=catalog)
        assert [e.exercise.id for e in entries] == ["allowed-1", "allowed-2", "adapted", "blocked"]
        assert [e.display_status for e in entries] == [
            DisplayStatus.AVAILABLE,
            DisplayStatus.AVAILABLE,
            DisplayStatus.ADAPTED,
            DisplayStatus.BLOCKED,
        ]

    def test_builtin_focus_listing(self, catalog):
        state = make_state(capacities={"focus_stability": 1})
        entries = evaluate_category(ExerciseCategory.FOCUS, state, catalog=catalog)
        assert [e.exercise.id for e in entries] == ["soft-focus", "grounding-breath", "box"]
        assert entries[-1].display_status == DisplayStatus.BLOCKED

    def test_empty_category(self, catalog):
        assert evaluate_category(ExerciseCategory.ENERGY, make_state(), catalog=catalog) == []


# ── Legacy result ─────────────────────────────────────────────


class TestLegacyResult:
    def test_block(self, exercise):
        state = make_state(contraindications={"breath_holds": True})
        result = to_legacy_result(decide(exercise("478"), state))
        assert result.allowed is False
        assert result.reason == "breath_holds"
        assert result.alternative_id == "extended-exhale"

    @pytest.mark.parametrize(
        "overrides, reason",
        [
            ({"capacities": {"hold_tolerance": 1}}, "adapted_pattern"),
            ({"sensitivity": Sensitivity.HIGH}, "adapted_for_sensitivity"),
        ],
    )
    def test_adapt(self, exercise, overrides, reason):
        result = to_legacy_result(decide(exercise("478"), make_state(**overrides)))
        assert result.allowed is True
        assert result.reason == reason
        assert result.adapted_pattern is not None

    def test_allow(self, exercise):
        result = to_legacy_result(decide(exercise("coherent"), make_state()))
        assert result.allowed is True
        assert result.reason is None
        assert result.adapted_pattern is None
