"""Local persistence for the profile snapshot."""

from breath_guard.storage.database import Base, ProfileSnapshotRow, get_session_factory, init_db
from breath_guard.storage.repository import LoadResult, ProfileRepository

__all__ = [
    "Base",
    "LoadResult",
    "ProfileRepository",
    "ProfileSnapshotRow",
    "get_session_factory",
    "init_db",
]
