"""Domain models for the messagely account directory."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Account:
    """A registered user as stored, including the password hash.

    Only returned by :meth:`AccountDirectory.register`; callers must not pass
    ``password_hash`` any further.
    """

    username: str
    password_hash: str
    first_name: str
    last_name: str
    phone: str
    joined_at: datetime
    last_login_at: Optional[datetime]

    def profile(self) -> "UserProfile":
        return UserProfile(
            username=self.username,
            first_name=self.first_name,
            last_name=self.last_name,
            phone=self.phone,
        )


@dataclass(frozen=True)
class UserProfile:
    """Public fields of an account."""

    username: str
    first_name: str
    last_name: str
    phone: str


@dataclass(frozen=True)
class UserDetail:
    username: str
    first_name: str
    last_name: str
    phone: str
    joined_at: datetime
    last_login_at: Optional[datetime]


@dataclass(frozen=True)
class OutboundMessage:
    """A message sent by a user, with the recipient's profile embedded."""

    id: int
    to_user: UserProfile
    body: str
    sent_at: datetime
    read_at: Optional[datetime]


@dataclass(frozen=True)
class InboundMessage:
    """A message received by a user, with the sender's profile embedded."""

    id: int
    from_user: UserProfile
    body: str
    sent_at: datetime
    read_at: Optional[datetime]


__all__ = ["Account", "InboundMessage", "OutboundMessage", "UserDetail", "UserProfile"]
