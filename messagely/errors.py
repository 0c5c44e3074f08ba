"""Errors raised by the account directory."""

from __future__ import annotations


class MessagelyError(Exception):
    """Base error carrying a message and an HTTP-style status classification."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(MessagelyError):
    status_code = 404


class ConflictError(MessagelyError):
    status_code = 409


__all__ = ["ConflictError", "MessagelyError", "NotFoundError"]
