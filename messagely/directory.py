"""Account lifecycle and message history queries."""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any, List, Mapping

from .database import Database, current_timestamp, parse_datetime, serialize_datetime
from .errors import ConflictError, NotFoundError
from .models import Account, InboundMessage, OutboundMessage, UserDetail, UserProfile
from .security import CredentialHasher

logger = logging.getLogger("messagely.directory")

Row = Mapping[str, Any]


# ----------------------------------------------------------------------
# Row mapping
# ----------------------------------------------------------------------
def row_to_account(row: Row) -> Account:
    return Account(
        username=str(row["username"]),
        password_hash=str(row["password"]),
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        phone=str(row["phone"]),
        joined_at=parse_datetime(row["join_at"]),
        last_login_at=parse_datetime(row["last_login_at"]),
    )


def row_to_profile(row: Row, *, username_column: str = "username") -> UserProfile:
    """Build a public profile from ``row``.

    Joined message rows carry the counterpart's username under
    ``to_username`` or ``from_username``, selected with ``username_column``.
    """

    return UserProfile(
        username=str(row[username_column]),
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        phone=str(row["phone"]),
    )


def row_to_detail(row: Row) -> UserDetail:
    return UserDetail(
        username=str(row["username"]),
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        phone=str(row["phone"]),
        joined_at=parse_datetime(row["join_at"]),
        last_login_at=parse_datetime(row["last_login_at"]),
    )


def row_to_outbound_message(row: Row) -> OutboundMessage:
    return OutboundMessage(
        id=int(row["id"]),
        to_user=row_to_profile(row, username_column="to_username"),
        body=str(row["body"]),
        sent_at=parse_datetime(row["sent_at"]),
        read_at=parse_datetime(row["read_at"]),
    )


def row_to_inbound_message(row: Row) -> InboundMessage:
    return InboundMessage(
        id=int(row["id"]),
        from_user=row_to_profile(row, username_column="from_username"),
        body=str(row["body"]),
        sent_at=parse_datetime(row["sent_at"]),
        read_at=parse_datetime(row["read_at"]),
    )


class AccountDirectory:
    """Registered users and their message history.

    The directory keeps no state of its own: every operation is a single
    round trip to ``store``, and credential work goes through ``hasher``.
    """

    def __init__(self, store: Database, hasher: CredentialHasher) -> None:
        self._store = store
        self._hasher = hasher

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------
    def register(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> Account:
        """Create a new account and return it, password hash included."""

        if not username:
            raise ValueError("Username must not be empty")
        if not password:
            raise ValueError("Password must not be empty")

        password_hash = self._hasher.hash(password)
        now = serialize_datetime(current_timestamp())

        try:
            rows = self._store.query(
                """
                INSERT INTO users (
                    username,
                    password,
                    first_name,
                    last_name,
                    phone,
                    join_at,
                    last_login_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                RETURNING username, password, first_name, last_name, phone, join_at, last_login_at
                """,
                (username, password_hash, first_name, last_name, phone, now, now),
            )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" not in str(exc):
                raise
            raise ConflictError(f'Username "{username}" is already taken') from exc

        logger.info("Registered user %s", username)
        return row_to_account(rows[0])

    def authenticate(self, username: str, password: str) -> bool:
        """Return ``True`` if ``password`` is valid for ``username``.

        An unknown username yields ``False`` just like a wrong password.
        """

        rows = self._store.query("SELECT password FROM users WHERE username = ?", (username,))
        if not rows:
            self._hasher.dummy_verify()
            logger.warning("Failed authentication attempt for %s", username)
            return False

        valid = self._hasher.verify(password, rows[0]["password"])
        if not valid:
            logger.warning("Failed authentication attempt for %s", username)
        return valid

    def record_login(self, username: str) -> datetime:
        """Set ``last_login_at`` to now and return the recorded timestamp."""

        rows = self._store.query(
            """
            UPDATE users
               SET last_login_at = ?
             WHERE username = ?
            RETURNING last_login_at
            """,
            (serialize_datetime(current_timestamp()), username),
        )
        if not rows:
            raise NotFoundError(f'User "{username}" does not exist')

        logger.info("Recorded login for %s", username)
        return parse_datetime(rows[0]["last_login_at"])

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def all(self) -> List[UserProfile]:
        rows = self._store.query(
            """
            SELECT username, first_name, last_name, phone
              FROM users
             ORDER BY username
            """
        )
        return [row_to_profile(row) for row in rows]

    def get(self, username: str) -> UserDetail:
        rows = self._store.query(
            """
            SELECT username, first_name, last_name, phone, join_at, last_login_at
              FROM users
             WHERE username = ?
            """,
            (username,),
        )
        if not rows:
            raise NotFoundError(f'User "{username}" does not exist')
        return row_to_detail(rows[0])

    # ------------------------------------------------------------------
    # Message history
    # ------------------------------------------------------------------
    def messages_from(self, username: str) -> List[OutboundMessage]:
        """Messages sent by ``username``, each carrying the recipient's profile."""

        rows = self._store.query(
            """
            SELECT m.id,
                   m.to_username,
                   m.body,
                   m.sent_at,
                   m.read_at,
                   u.first_name,
                   u.last_name,
                   u.phone
              FROM messages AS m
              JOIN users AS u ON m.to_username = u.username
             WHERE m.from_username = ?
             ORDER BY m.id
            """,
            (username,),
        )
        return [row_to_outbound_message(row) for row in rows]

    def messages_to(self, username: str) -> List[InboundMessage]:
        """Messages received by ``username``, each carrying the sender's profile."""

        rows = self._store.query(
            """
            SELECT m.id,
                   m.from_username,
                   m.body,
                   m.sent_at,
                   m.read_at,
                   u.first_name,
                   u.last_name,
                   u.phone
              FROM messages AS m
              JOIN users AS u ON m.from_username = u.username
             WHERE m.to_username = ?
             ORDER BY m.id
            """,
            (username,),
        )
        return [row_to_inbound_message(row) for row in rows]


__all__ = [
    "AccountDirectory",
    "row_to_account",
    "row_to_detail",
    "row_to_inbound_message",
    "row_to_outbound_message",
    "row_to_profile",
]
