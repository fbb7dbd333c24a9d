"""Built-in exercise definitions with safety metadata."""

from __future__ import annotations

from breath_guard.models import (
    BreathPattern,
    CapacityName,
    Contraindication,
    Exercise,
    ExerciseCategory,
    ExerciseSafety,
    Guidance,
)

# Fixed ids the engine falls back to.
TRAUMA_SAFE_ID = "trauma-safe"
COHERENT_ID = "coherent"

# ── Calming ───────────────────────────────────────────────────

_CALMING: list[Exercise] = [
    Exercise(
        id="physiological-sigh",
        name="Physiological sigh",
        category=ExerciseCategory.CALMING,
        short_description="Fast down-regulation",
        description="Double inhale followed by a long exhale. The body's own calm button.",
        pattern=BreathPattern(inhale=3, hold_in=0, exhale=6, hold_out=1),
        default_rounds=3,
        guidance=Guidance(
            start="Breathe in through the nose, pause briefly, then sip in a little more.",
            end="Let your breathing return to normal.",
        ),
        safety=ExerciseSafety(max_intensity=1),
    ),
    Exercise(
        id=COHERENT_ID,
        name="Coherent breathing",
        category=ExerciseCategory.CALMING,
        short_description="Heart and breath in sync",
        description="An even rhythm that lets heart and breath settle together.",
        pattern=BreathPattern(inhale=5, hold_in=0, exhale=5, hold_out=0),
        default_minutes=5,
        guidance=Guidance(
            start="Find a comfortable rhythm.",
            mid="Let the body do the work.",
            end="Stay here for a moment.",
        ),
        safety=ExerciseSafety(max_intensity=1),
    ),
    Exercise(
        id="extended-exhale",
        name="Extended exhale",
        category=ExerciseCategory.CALMING,
        short_description="4-6 breathing",
        description="A longer exhale activates the parasympathetic system.",
        pattern=BreathPattern(inhale=4, hold_in=0, exhale=6, hold_out=0),
        default_minutes=5,
        guidance=Guidance(
            start="Let the exhale be soft.",
            end="Notice the body settling.",
        ),
        safety=ExerciseSafety(max_intensity=1),
    ),
    Exercise(
        id="478",
        name="4-7-8 breathing",
        category=ExerciseCategory.CALMING,
        short_description="Sleep and rest",
        description="Deep relaxation. Contains a breath hold.",
        pattern=BreathPattern(inhale=4, hold_in=7, exhale=8, hold_out=0),
        default_rounds=4,
        guidance=Guidance(start="Let it take its time.", end="Rest in the stillness."),
        safety=ExerciseSafety(
            max_intensity=2,
            requires_hold_tolerance=True,
            minimum_capacity={CapacityName.HOLD_TOLERANCE: 2},
            trauma_safe_alternative_id="extended-exhale",
            contraindicated=frozenset({Contraindication.BREATH_HOLDS}),
        ),
    ),
    Exercise(
        id=TRAUMA_SAFE_ID,
        name="Safe breathing",
        category=ExerciseCategory.CALMING,
        short_description="Extra gentle",
        description="A soft rhythm without holds. Safe for everyone.",
        pattern=BreathPattern(inhale=4, hold_in=0, exhale=6, hold_out=0),
        default_minutes=5,
        guidance=Guidance(start="This is gentle.", end="You took care of yourself."),
        safety=ExerciseSafety(max_intensity=1),
    ),
]

# ── Focus ─────────────────────────────────────────────────────
# Stable presence at low arousal: intensity at most 2, no fast breathing.

_FOCUS: list[Exercise] = [
    Exercise(
        id="box",
        name="Box breathing",
        category=ExerciseCategory.FOCUS,
        short_description="A square for stability",
        description="Four equal phases build a sense of steadiness. No rush.",
        pattern=BreathPattern(inhale=4, hold_in=4, exhale=4, hold_out=4),
        default_minutes=5,
        guidance=Guidance(
            start="Imagine drawing a square with your breath.",
            mid="No phase matters more than another.",
            end="Notice the stability you have created.",
        ),
        safety=ExerciseSafety(
            max_intensity=2,
            requires_hold_tolerance=True,
            minimum_capacity={
                CapacityName.HOLD_TOLERANCE: 2,
                CapacityName.FOCUS_STABILITY: 2,
            },
            trauma_safe_alternative_id=COHERENT_ID,
            contraindicated=frozenset({Contraindication.BREATH_HOLDS}),
        ),
    ),
    Exercise(
        id="soft-focus",
        name="Soft focus",
        category=ExerciseCategory.FOCUS,
        short_description="Presence without effort",
        description="A simple rhythm that supports presence without performing.",
        pattern=BreathPattern(inhale=4, hold_in=0, exhale=4, hold_out=0),
        default_minutes=5,
        guidance=Guidance(
            start="Let the breath find its own rhythm.",
            mid="There is nothing to get right.",
            end="Carry this presence with you.",
        ),
        safety=ExerciseSafety(max_intensity=1),
    ),
    Exercise(
        id="grounding-breath",
        name="Grounding breath",
        category=ExerciseCategory.FOCUS,
        short_description="Anchored in the present",
        description="A longer exhale to land in the body and the present moment.",
        pattern=BreathPattern(inhale=4, hold_in=0, exhale=6, hold_out=2),
        default_minutes=5,
        guidance=Guidance(
            start="Breathe in through the nose, out through the mouth.",
            mid="Feel your contact with the ground.",
            end="You are here. Right now.",
        ),
        safety=ExerciseSafety(max_intensity=1),
    ),
]

EXERCISES: list[Exercise] = [*_CALMING, *_FOCUS]
