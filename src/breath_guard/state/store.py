"""ProfileStore — the single owner of the mutable user profile.

Every reader gets an immutable :class:`UserState` snapshot; every write
replaces the snapshot wholesale under a lock and then notifies subscribers.
Persistence is left to subscribers (see :mod:`breath_guard.storage`).
"""

from __future__ import annotations

import threading
from typing import Callable, Mapping

import structlog

from breath_guard.catalog.onboarding import apply_onboarding_answers
from breath_guard.catalog.registry import ExerciseCatalog, default_catalog
from breath_guard.config import Settings, get_settings
from breath_guard.models import SessionFeedback, SessionRecord, UserState, default_user_state
from breath_guard.state.outcomes import apply_session_outcome

logger = structlog.get_logger(__name__)

Subscriber = Callable[[UserState], None]


class ProfileStore:
    """Single-writer holder of the current profile snapshot."""

    def __init__(
        self,
        initial: UserState | None = None,
        catalog: ExerciseCatalog | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._state = initial if initial is not None else default_user_state()
        self._catalog = catalog or default_catalog()
        self._settings = settings or get_settings()
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []

    # ── Snapshot access ───────────────────────────────────────

    def get(self) -> UserState:
        return self._state

    def set(self, state: UserState) -> None:
        with self._lock:
            subscribers = self._swap(state)
        self._notify(subscribers, state)

    def update(self, fn: Callable[[UserState], UserState]) -> UserState:
        """Apply *fn* to the current snapshot as one read-modify-write."""
        with self._lock:
            new_state = fn(self._state)
            subscribers = self._swap(new_state)
        self._notify(subscribers, new_state)
        return new_state

    def _swap(self, state: UserState) -> list[Subscriber]:
        # caller holds the lock; subscribers are notified after it is released
        self._state = state
        return list(self._subscribers)

    @staticmethod
    def _notify(subscribers: list[Subscriber], state: UserState) -> None:
        for callback in subscribers:
            callback(state)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # ── Profile operations ────────────────────────────────────

    def complete_onboarding(self, answers: Mapping[str, str]) -> UserState:
        return self.update(lambda state: apply_onboarding_answers(state, answers))

    def record_session(
        self,
        exercise_id: str,
        duration_minutes: float,
        cycles: int,
        feedback: SessionFeedback | None,
        was_early_exit: bool,
    ) -> SessionRecord:
        """Record a finished or aborted session.

        Raises :class:`~breath_guard.catalog.ExerciseNotFoundError` for an
        id the catalog does not know.
        """
        exercise = self._catalog.get(exercise_id)
        records: list[SessionRecord] = []

        def _apply(state: UserState) -> UserState:
            new_state, record = apply_session_outcome(
                state,
                exercise,
                duration_minutes,
                cycles,
                feedback,
                was_early_exit,
                history_limit=self._settings.session_history_limit,
                capacity_increment=self._settings.capacity_increment,
            )
            records.append(record)
            return new_state

        self.update(_apply)
        return records[0]

    def reset(self) -> UserState:
        """Replace the profile with a fresh default one (new id)."""
        logger.info("profile.reset", previous_user_id=self._state.id)
        state = default_user_state()
        self.set(state)
        return state
