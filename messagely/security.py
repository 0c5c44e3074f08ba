"""Password hashing for account credentials."""
from __future__ import annotations

from passlib.context import CryptContext

DEFAULT_WORK_FACTOR = 12
MIN_WORK_FACTOR = 4
MAX_WORK_FACTOR = 31

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class CredentialHasher:
    """Salted bcrypt hashing with a configurable work factor."""

    def __init__(self, work_factor: int = DEFAULT_WORK_FACTOR) -> None:
        if not MIN_WORK_FACTOR <= work_factor <= MAX_WORK_FACTOR:
            raise ValueError(
                f"bcrypt work factor must be between {MIN_WORK_FACTOR} and {MAX_WORK_FACTOR}"
            )
        self.work_factor = work_factor
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=work_factor,
        )

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password must not be empty")
        if password_too_long(password):
            raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        """Return ``True`` if ``password`` matches ``hashed``.

        Digests that passlib cannot identify, and passwords longer than
        bcrypt can distinguish, are treated as a mismatch.
        """

        if not hashed:
            return False
        if password_too_long(password):
            self.dummy_verify()
            return False
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """Burn roughly one verification's worth of time and return ``False``."""

        return self._context.dummy_verify()


__all__ = ["CredentialHasher", "DEFAULT_WORK_FACTOR", "MAX_PASSWORD_BYTES"]
