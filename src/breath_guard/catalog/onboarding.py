"""Onboarding questions and the mapping of answers onto the initial profile."""

from __future__ import annotations

from typing import Mapping, Sequence

import structlog

from breath_guard.models import (
    Baseline,
    CapacityName,
    Contraindication,
    OnboardingEffects,
    OnboardingOption,
    OnboardingQuestion,
    Sensitivity,
    UserState,
)

logger = structlog.get_logger(__name__)

ONBOARDING_QUESTIONS: tuple[OnboardingQuestion, ...] = (
    OnboardingQuestion(
        id="baseline",
        question="How do you usually feel day to day?",
        subtext="Think about the last few weeks.",
        options=[
            OnboardingOption(
                id="calm",
                label="Mostly calm",
                effects=OnboardingEffects(
                    baseline=Baseline.CALM,
                    capacities={CapacityName.CALM_BREATHING: 3},
                ),
            ),
            OnboardingOption(
                id="neutral",
                label="It varies",
                effects=OnboardingEffects(baseline=Baseline.NEUTRAL),
            ),
            OnboardingOption(
                id="stressed",
                label="Often stressed",
                effects=OnboardingEffects(
                    baseline=Baseline.STRESSED, sensitivity=Sensitivity.HIGH
                ),
            ),
            OnboardingOption(
                id="overwhelmed",
                label="Often overwhelmed",
                effects=OnboardingEffects(
                    baseline=Baseline.OVERSTIMULATED,
                    sensitivity=Sensitivity.HIGH,
                    capacities={
                        CapacityName.CALM_BREATHING: 1,
                        CapacityName.ENERGY_REGULATION: 1,
                    },
                ),
            ),
        ],
    ),
    OnboardingQuestion(
        id="experience",
        question="Have you tried breathing exercises before?",
        subtext="There is no right answer.",
        options=[
            OnboardingOption(
                id="none",
                label="Never",
                effects=OnboardingEffects(
                    sensitivity=Sensitivity.HIGH,
                    capacities={
                        CapacityName.HOLD_TOLERANCE: 1,
                        CapacityName.FOCUS_STABILITY: 1,
                    },
                ),
            ),
            OnboardingOption(
                id="some",
                label="A little",
                effects=OnboardingEffects(sensitivity=Sensitivity.MEDIUM),
            ),
            OnboardingOption(
                id="regular",
                label="Regularly",
                effects=OnboardingEffects(
                    sensitivity=Sensitivity.LOW,
                    capacities={
                        CapacityName.HOLD_TOLERANCE: 3,
                        CapacityName.FOCUS_STABILITY: 3,
                    },
                ),
            ),
        ],
    ),
    OnboardingQuestion(
        id="contraindications",
        question="Does any of this apply to you?",
        subtext="We adapt the exercises. Nobody is left out.",
        options=[
            OnboardingOption(id="none", label="None of these"),
            OnboardingOption(
                id="anxiety",
                label="Anxiety or panic",
                effects=OnboardingEffects(
                    sensitivity=Sensitivity.HIGH,
                    contraindications={
                        Contraindication.FAST_BREATHING: True,
                        Contraindication.BREATH_HOLDS: True,
                    },
                ),
            ),
            OnboardingOption(
                id="heart",
                label="Heart problems",
                effects=OnboardingEffects(
                    contraindications={
                        Contraindication.FAST_BREATHING: True,
                        Contraindication.BREATH_HOLDS: True,
                    },
                ),
            ),
            OnboardingOption(
                id="pregnancy",
                label="Pregnant",
                effects=OnboardingEffects(
                    contraindications={Contraindication.FAST_BREATHING: True},
                ),
            ),
        ],
    ),
)


def apply_effects(state: UserState, effects: OnboardingEffects) -> UserState:
    """Apply one answer's effects; fields the answer does not declare are kept."""
    update: dict = {}
    if effects.baseline is not None:
        update["baseline"] = effects.baseline
    if effects.sensitivity is not None:
        update["sensitivity"] = effects.sensitivity
    if effects.contraindications:
        update["contraindications"] = state.contraindications.model_copy(
            update={k.value: v for k, v in effects.contraindications.items()}
        )
    if effects.capacities:
        update["capacities"] = state.capacities.model_copy(
            update={k.value: float(v) for k, v in effects.capacities.items()}
        )
    return state.model_copy(update=update) if update else state


def apply_onboarding_answers(
    state: UserState,
    answers: Mapping[str, str],
    questions: Sequence[OnboardingQuestion] = ONBOARDING_QUESTIONS,
) -> UserState:
    """Build the post-onboarding profile from ``{question_id: option_id}``.

    Answers are applied in the mapping's order, so a later answer overrides
    fields an earlier one set.  Unknown question or option ids are skipped.
    """
    by_id = {q.id: q for q in questions}
    for question_id, option_id in answers.items():
        question = by_id.get(question_id)
        option = question.option(option_id) if question else None
        if option is None:
            logger.warning(
                "onboarding.unknown_answer",
                question_id=question_id,
                option_id=option_id,
            )
            continue
        state = apply_effects(state, option.effects)

    logger.info(
        "onboarding.completed",
        user_id=state.id,
        baseline=state.baseline.value,
        sensitivity=state.sensitivity.value,
    )
    return state.model_copy(update={"onboarding_completed": True})
