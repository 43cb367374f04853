"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Body of POST /sessions."""
    email: str
    password: str


class Session(BaseModel):
    """Response from the session endpoint. Only the token is persisted."""
    token: str = Field(min_length=1)
    expires_at: datetime | None = Field(default=None, alias="expiresAt")

    model_config = {"populate_by_name": True}


class TokenStatus(BaseModel):
    """Local view of the stored token."""
    has_token: bool
    token_path: str
