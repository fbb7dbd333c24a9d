"""Tests for the profile store and the SafetyEngine facade."""

from __future__ import annotations

import pytest

from breath_guard.catalog import ExerciseNotFoundError
from breath_guard.config import Settings
from breath_guard.models import Baseline, SessionFeedback, Sensitivity
from breath_guard.safety import AdaptDecision, SafetyEngine, create_safety_engine
from breath_guard.state import ProfileStore, build_session_context

from tests.factories import make_state


@pytest.fixture
def store(catalog) -> ProfileStore:
    return ProfileStore(initial=make_state(), catalog=catalog, settings=Settings())


class TestProfileStore:
    def test_subscribers_see_new_snapshot(self, store):
        seen = []
        store.subscribe(seen.append)
        store.record_session("coherent", 5, 30, SessionFeedback.CALMER, False)
        assert len(seen) == 1
        assert seen[0] is store.get()
        assert seen[0].capacities.calm_breathing == 2.2

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        store.set(make_state(baseline=Baseline.CALM))
        assert seen == []

    def test_record_session_returns_record(self, store):
        record = store.record_session("478", 3, 4, SessionFeedback.SAME, False)
        assert store.get().session_history == [record]
        assert store.get().last_session_at == record.timestamp

    def test_unknown_exercise_leaves_state_alone(self, store):
        before = store.get()
        with pytest.raises(ExerciseNotFoundError):
            store.record_session("nope", 3, 4, SessionFeedback.SAME, False)
        assert store.get() is before

    def test_history_limit_from_settings(self, catalog):
        store = ProfileStore(initial=make_state(), catalog=catalog, settings=Settings(session_history_limit=2))
        for _ in range(4):
            store.record_session("coherent", 5, 30, None, False)
        assert len(store.get().session_history) == 2

    def test_complete_onboarding(self, store):
        state = store.complete_onboarding({"baseline": "stressed"})
        assert state.baseline == Baseline.STRESSED
        assert state.sensitivity == Sensitivity.HIGH
        assert store.get() is state

    def test_reset(self, store):
        old_id = store.get().id
        state = store.reset()
        assert state.id != old_id
        assert state.onboarding_completed is False
        assert store.get() is state

    def test_update_is_atomic_read_modify_write(self, store):
        store.update(lambda s: s.model_copy(update={"current_day_in_program": s.current_day_in_program + 1}))
        assert store.get().current_day_in_program == 2

    def test_subscriber_may_write_back(self, store):
        seen = []

        def bump_once(state):
            seen.append(store.get())
            if len(seen) == 1:
                store.update(lambda s: s.model_copy(update={"current_day_in_program": 5}))

        store.subscribe(bump_once)
        store.record_session("coherent", 5, 30, SessionFeedback.CALMER, False)
        assert len(seen) == 2
        assert seen[0].session_history
        assert store.get().current_day_in_program == 5
        assert store.get().session_history == seen[0].session_history


class TestSafetyEngine:
    def test_decide_by_id(self, catalog):
        engine = SafetyEngine(catalog=catalog)
        decision = engine.decide("478", make_state(capacities={"hold_tolerance": 1}))
        assert isinstance(decision, AdaptDecision)

    def test_decide_unknown_id(self, catalog):
        with pytest.raises(ExerciseNotFoundError):
            SafetyEngine(catalog=catalog).decide("nope", make_state())

    def test_seeded_engines_agree(self):
        settings = Settings(random_seed=11)
        state = make_state()
        first = create_safety_engine(settings).configure_integration(state, 1)
        second = create_safety_engine(settings).configure_integration(state, 1)
        assert first == second

    def test_full_session_flow(self, store):
        engine = create_safety_engine(Settings(random_seed=3))
        context = build_session_context(store.get())
        rec = engine.recommend(store.get(), context)
        duration = engine.recommend_duration(rec.exercise, store.get(), context)
        integration = engine.configure_integration(
            store.get(), rec.exercise.safety.max_intensity, context
        )
        assert rec.decision.type != "block"
        assert (duration.minutes is None) != (duration.rounds is None)
        assert integration.duration_seconds == 45

        store.record_session(rec.exercise.id, 5, 30, SessionFeedback.MORE_ACTIVATED, False)
        state = store.get()
        assert state.adaptive_flags.suggest_grounding is True
        assert engine.recommend(state, build_session_context(state)).exercise.id == "trauma-safe"
