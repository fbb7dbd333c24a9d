"""Exercise catalog — read-only lookup by id and by category."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Iterator

from breath_guard.catalog.exercises import EXERCISES
from breath_guard.models import Exercise, ExerciseCategory


class ExerciseNotFoundError(LookupError):
    """Raised when an exercise id is not present in the catalog."""

    def __init__(self, exercise_id: str, available: Iterable[str] = ()) -> None:
        self.exercise_id = exercise_id
        super().__init__(
            f"No exercise with id {exercise_id!r}. Available: {sorted(available)}"
        )


class ExerciseCatalog:
    """Immutable, ordered collection of :class:`Exercise` definitions.

    Order is significant: category scans and recommendation tie-breaks follow
    the order exercises were supplied in.
    """

    def __init__(self, exercises: Iterable[Exercise]) -> None:
        self._exercises: tuple[Exercise, ...] = tuple(exercises)
        self._by_id: dict[str, Exercise] = {}
        for exercise in self._exercises:
            if exercise.id in self._by_id:
                raise ValueError(f"Duplicate exercise id {exercise.id!r} in catalog")
            self._by_id[exercise.id] = exercise

    # ── Lookup ────────────────────────────────────────────────

    def get(self, exercise_id: str) -> Exercise:
        """Return the exercise or raise :class:`ExerciseNotFoundError`."""
        try:
            return self._by_id[exercise_id]
        except KeyError:
            raise ExerciseNotFoundError(exercise_id, self._by_id) from None

    def find(self, exercise_id: str) -> Exercise | None:
        return self._by_id.get(exercise_id)

    def by_category(self, category: ExerciseCategory) -> list[Exercise]:
        return [e for e in self._exercises if e.category == category]

    def all(self) -> list[Exercise]:
        return list(self._exercises)

    # ── Container protocol ────────────────────────────────────

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def __len__(self) -> int:
        return len(self._exercises)


@lru_cache(maxsize=1)
def default_catalog() -> ExerciseCatalog:
    """Return the built-in catalog (shared, read-only)."""
    return ExerciseCatalog(EXERCISES)
