"""Session context builder — derive the situational input from history."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Sequence

from breath_guard.models import (
    SessionContext,
    SessionFeedback,
    SessionRecord,
    TimeOfDay,
    UserState,
)

# Only the most recent sessions can form a "consecutive negative" run.
_NEGATIVE_WINDOW = 5


def get_time_of_day(hour: int) -> TimeOfDay:
    """Map an hour (0-23) to a band: <10 morning, <14 afternoon, <20 evening."""
    if hour < 10:
        return TimeOfDay.MORNING
    if hour < 14:
        return TimeOfDay.AFTERNOON
    if hour < 20:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT


def _is_negative(record: SessionRecord) -> bool:
    return record.feedback == SessionFeedback.MORE_ACTIVATED or record.was_early_exit


def count_consecutive_negative(history: Sequence[SessionRecord]) -> int:
    """Leading run of ``more_activated`` / early-exit sessions."""
    count = 0
    for record in history[:_NEGATIVE_WINDOW]:
        if not _is_negative(record):
            break
        count += 1
    return count


def _aware(ts: datetime) -> datetime:
    """Naive datetimes are taken as local wall-clock time."""
    return ts if ts.tzinfo is not None else ts.astimezone()


def _local_date(ts: datetime, now: datetime) -> date:
    return _aware(ts).astimezone(now.tzinfo).date()


def calculate_streak(history: Sequence[SessionRecord], now: datetime) -> int:
    """Consecutive calendar days with a session, counting back from today."""
    streak = 0
    expected = now.date()
    for record in history:
        day = _local_date(record.timestamp, now)
        if day == expected:
            streak += 1
            expected -= timedelta(days=1)
        elif day < expected:
            break
    return streak


def build_session_context(user_state: UserState, now: datetime | None = None) -> SessionContext:
    """Compute the :class:`SessionContext` for *user_state* at *now*.

    Time of day and streak days follow the local clock; *now* defaults to
    the current local time.
    """
    now = _aware(now) if now is not None else datetime.now().astimezone()
    history = user_state.session_history

    days_since: int | None = None
    if user_state.last_session_at is not None:
        days_since = max(0, (now - _aware(user_state.last_session_at)).days)

    return SessionContext(
        time_of_day=get_time_of_day(now.hour),
        days_since_last_session=days_since,
        recent_feedback=history[0].feedback if history else None,
        consecutive_negative_experiences=count_consecutive_negative(history),
        streak_days=calculate_streak(history, now),
    )
