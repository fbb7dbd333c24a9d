"""Data-access layer — persist the profile snapshot with a backup copy.

Every save writes the same payload under two keys.  On load a corrupt or
missing primary falls back to the backup (which is then copied back over
the primary); when both are unusable a fresh default profile is returned.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from breath_guard.config import get_settings
from breath_guard.models import UserState, default_user_state
from breath_guard.storage.database import ProfileSnapshotRow, get_session_factory

logger = structlog.get_logger(__name__)

BACKUP_SUFFIX = "_backup"


@dataclass(frozen=True)
class LoadResult:
    state: UserState
    used_backup: bool = False
    created_default: bool = False


class BaseRepository:
    """Shared base with session management for all repositories."""

    def __init__(self, session: AsyncSession | None = None) -> None:
        self._external_session = session
        self._owned_session: AsyncSession | None = None

    async def _session(self) -> AsyncSession:
        if self._external_session is not None:
            return self._external_session
        if self._owned_session is None:
            self._owned_session = get_session_factory()()
        return self._owned_session

    async def close(self) -> None:
        """Close the session this repository opened itself, if any."""
        if self._owned_session is not None:
            await self._owned_session.close()
            self._owned_session = None


class ProfileRepository(BaseRepository):
    """Load / save / clear the single local profile."""

    def __init__(
        self,
        session: AsyncSession | None = None,
        storage_key: str | None = None,
    ) -> None:
        super().__init__(session)
        self.primary_key = storage_key or get_settings().profile_storage_key
        self.backup_key = f"{self.primary_key}{BACKUP_SUFFIX}"

    # ── Read ──────────────────────────────────────────────────

    async def _read(self, session: AsyncSession, key: str) -> UserState | None:
        row = await session.get(ProfileSnapshotRow, key)
        if row is None:
            logger.info("storage.snapshot_missing", key=key)
            return None
        try:
            return UserState.model_validate_json(row.payload_json)
        except ValidationError as exc:
            logger.warning("storage.snapshot_corrupt", key=key, errors=exc.error_count())
            return None

    async def load(self) -> LoadResult:
        session = await self._session()

        state = await self._read(session, self.primary_key)
        if state is not None:
            await self._write(session, self.backup_key, state)
            await session.commit()
            return LoadResult(state=state)

        state = await self._read(session, self.backup_key)
        if state is not None:
            await self._write(session, self.primary_key, state)
            await session.commit()
            logger.info("storage.restored_from_backup", user_id=state.id)
            return LoadResult(state=state, used_backup=True)

        logger.warning("storage.created_default", key=self.primary_key)
        return LoadResult(state=default_user_state(), created_default=True)

    # ── Write ─────────────────────────────────────────────────

    async def _write(self, session: AsyncSession, key: str, state: UserState) -> None:
        payload = state.model_dump_json()
        existing = await session.get(ProfileSnapshotRow, key)
        if existing is None:
            session.add(ProfileSnapshotRow(key=key, payload_json=payload))
        else:
            existing.payload_json = payload

    async def save(self, state: UserState) -> None:
        session = await self._session()
        await self._write(session, self.primary_key, state)
        await self._write(session, self.backup_key, state)
        await session.commit()

    async def clear(self) -> int:
        """Delete primary and backup snapshots.  Returns rows deleted."""
        session = await self._session()
        stmt = delete(ProfileSnapshotRow).where(
            ProfileSnapshotRow.key.in_([self.primary_key, self.backup_key])
        )
        result = await session.execute(stmt)
        await session.commit()
        return result.rowcount or 0

    async def keys(self) -> list[str]:
        session = await self._session()
        result = await session.execute(select(ProfileSnapshotRow.key).order_by(ProfileSnapshotRow.key))
        return list(result.scalars().all())
