"""Centralised settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_DEFAULT_DB_URL = f"sqlite+aiosqlite:///{_PROJECT_ROOT / 'data' / 'breath_guard.db'}"


class Settings(BaseSettings):
    """Runtime configuration for the breath-guard engine.

    The decision functions themselves never read settings; they take every
    tunable as a parameter.  Only the composition-root factories
    (:func:`~breath_guard.safety.engine.create_safety_engine`,
    :class:`~breath_guard.state.store.ProfileStore`) consult this object.
    Variables live in the ``BREATH_GUARD_`` namespace.
    """

    model_config = SettingsConfigDict(
        env_prefix="BREATH_GUARD_",
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ───────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ── Persistence ───────────────────────────────────────────
    database_url: str = _DEFAULT_DB_URL
    profile_storage_key: str = "user_state_v1"

    # ── Session outcome rules ─────────────────────────────────
    session_history_limit: int = Field(100, ge=1)
    capacity_increment: float = Field(0.2, gt=0.0, le=1.0)  # 5 calm sessions per level

    # ── Integration ───────────────────────────────────────────
    integration_text_count: int = Field(3, ge=1)
    random_seed: int | None = None  # fixed seed makes text selection reproducible


@lru_cache
def get_settings() -> Settings:
    """Return a cached :class:`Settings` singleton."""
    return Settings()
