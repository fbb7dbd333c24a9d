"""Catalog sub-package — exercise definitions, onboarding and integration content."""

from breath_guard.catalog.exercises import COHERENT_ID, EXERCISES, TRAUMA_SAFE_ID
from breath_guard.catalog.onboarding import ONBOARDING_QUESTIONS, apply_onboarding_answers
from breath_guard.catalog.registry import (
    ExerciseCatalog,
    ExerciseNotFoundError,
    default_catalog,
)

__all__ = [
    "COHERENT_ID",
    "EXERCISES",
    "ONBOARDING_QUESTIONS",
    "TRAUMA_SAFE_ID",
    "ExerciseCatalog",
    "ExerciseNotFoundError",
    "apply_onboarding_answers",
    "default_catalog",
]
