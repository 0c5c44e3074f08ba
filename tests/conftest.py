from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from messagely.database import Database, current_timestamp, serialize_datetime
from messagely.directory import AccountDirectory
from messagely.security import CredentialHasher


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db = Database(tmp_path / "messagely.sqlite3")
    db.initialize()
    return db


@pytest.fixture()
def hasher() -> CredentialHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return CredentialHasher(work_factor=4)


@pytest.fixture()
def directory(database: Database, hasher: CredentialHasher) -> AccountDirectory:
    return AccountDirectory(database, hasher)


@pytest.fixture()
def send_message(database: Database) -> Callable[..., int]:
    """Insert a message directly; the directory itself never writes messages."""

    def _send(from_username: str, to_username: str, body: str, read_at: Optional[str] = None) -> int:
        rows = database.query(
            """
            INSERT INTO messages (from_username, to_username, body, sent_at, read_at)
            VALUES (?, ?, ?, ?, ?)
            RETURNING id
            """,
            (from_username, to_username, body, serialize_datetime(current_timestamp()), read_at),
        )
        return int(rows[0]["id"])

    return _send
