"""Account directory and message history for the messagely application."""

from __future__ import annotations

from typing import Any

from .config import Settings, load_settings
from .database import Database, resolve_database_path
from .directory import AccountDirectory
from .errors import ConflictError, MessagelyError, NotFoundError
from .security import CredentialHasher


def create_directory(settings: Settings | None = None, *, initialize: bool = True) -> AccountDirectory:
    """Wire an :class:`AccountDirectory` to the configured database and hasher."""

    if settings is None:
        settings = load_settings()

    database = Database(settings.database_path)
    if initialize:
        database.initialize()
    return AccountDirectory(database, CredentialHasher(settings.bcrypt_work_factor))


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the HTTP application."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "AccountDirectory",
    "ConflictError",
    "CredentialHasher",
    "Database",
    "MessagelyError",
    "NotFoundError",
    "Settings",
    "create_app",
    "create_directory",
    "load_settings",
    "resolve_database_path",
]
