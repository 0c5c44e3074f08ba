"""FastAPI application exposing the account directory over HTTP."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from .config import Settings
from .directory import AccountDirectory
from .errors import MessagelyError
from .models import InboundMessage, OutboundMessage, UserDetail, UserProfile
from .security import MAX_PASSWORD_BYTES, password_too_long

logger = logging.getLogger("messagely.api")


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=32)

    @field_validator("username", "first_name", "last_name", "phone")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be empty")
        return stripped

    @field_validator("password")
    @classmethod
    def _check_password_length(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"must not exceed {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    username: str
    last_login_at: datetime


class UserResponse(BaseModel):
    username: str
    first_name: str
    last_name: str
    phone: str


class UserDetailResponse(UserResponse):
    joined_at: datetime
    last_login_at: Optional[datetime]


class SentMessageResponse(BaseModel):
    id: int
    to_user: UserResponse
    body: str
    sent_at: datetime
    read_at: Optional[datetime]


class ReceivedMessageResponse(BaseModel):
    id: int
    from_user: UserResponse
    body: str
    sent_at: datetime
    read_at: Optional[datetime]


def profile_to_response(profile: UserProfile) -> UserResponse:
    return UserResponse(
        username=profile.username,
        first_name=profile.first_name,
        last_name=profile.last_name,
        phone=profile.phone,
    )


def detail_to_response(detail: UserDetail) -> UserDetailResponse:
    return UserDetailResponse(
        username=detail.username,
        first_name=detail.first_name,
        last_name=detail.last_name,
        phone=detail.phone,
        joined_at=detail.joined_at,
        last_login_at=detail.last_login_at,
    )


def outbound_to_response(message: OutboundMessage) -> SentMessageResponse:
    return SentMessageResponse(
        id=message.id,
        to_user=profile_to_response(message.to_user),
        body=message.body,
        sent_at=message.sent_at,
        read_at=message.read_at,
    )


def inbound_to_response(message: InboundMessage) -> ReceivedMessageResponse:
    return ReceivedMessageResponse(
        id=message.id,
        from_user=profile_to_response(message.from_user),
        body=message.body,
        sent_at=message.sent_at,
        read_at=message.read_at,
    )


def create_app(
    *,
    directory: AccountDirectory | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the HTTP application around ``directory``.

    Routes are plain functions so FastAPI runs them in its worker threadpool;
    bcrypt hashing therefore never blocks the event loop.
    """

    if directory is None:
        from . import create_directory

        directory = create_directory(settings)

    app = FastAPI(
        title="Messagely",
        description="Account directory and message history for messagely",
        version="1.0.0",
    )
    app.state.directory = directory

    @app.exception_handler(MessagelyError)
    async def _handle_messagely_error(request: Request, exc: MessagelyError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    def get_directory() -> AccountDirectory:
        return directory

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/auth/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    def register(
        payload: RegisterRequest,
        users: AccountDirectory = Depends(get_directory),
    ) -> UserResponse:
        account = users.register(
            payload.username,
            payload.password,
            payload.first_name,
            payload.last_name,
            payload.phone,
        )
        return profile_to_response(account.profile())

    @app.post("/auth/login", response_model=LoginResponse)
    def login(
        payload: LoginRequest,
        users: AccountDirectory = Depends(get_directory),
    ) -> LoginResponse:
        if not users.authenticate(payload.username, payload.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
            )
        last_login_at = users.record_login(payload.username)
        logger.info("User %s logged in", payload.username)
        return LoginResponse(username=payload.username, last_login_at=last_login_at)

    @app.get("/users", response_model=List[UserResponse])
    def list_users(users: AccountDirectory = Depends(get_directory)) -> List[UserResponse]:
        return [profile_to_response(profile) for profile in users.all()]

    @app.get("/users/{username}", response_model=UserDetailResponse)
    def read_user(username: str, users: AccountDirectory = Depends(get_directory)) -> UserDetailResponse:
        return detail_to_response(users.get(username))

    @app.get("/users/{username}/from", response_model=List[SentMessageResponse])
    def read_messages_from(
        username: str,
        users: AccountDirectory = Depends(get_directory),
    ) -> List[SentMessageResponse]:
        return [outbound_to_response(message) for message in users.messages_from(username)]

    @app.get("/users/{username}/to", response_model=List[ReceivedMessageResponse])
    def read_messages_to(
        username: str,
        users: AccountDirectory = Depends(get_directory),
    ) -> List[ReceivedMessageResponse]:
        return [inbound_to_response(message) for message in users.messages_to(username)]

    return app


__all__ = ["create_app"]
