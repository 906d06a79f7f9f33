"""Pydantic schemas for auth and share API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class RegisterRequest(BaseModel):
    """Request body for sign-up."""

    username: str = Field(..., min_length=1, max_length=10)
    password: str = Field(..., min_length=1, max_length=16)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        self.username = self.username.strip()
        if not self.username:
            raise ValueError("Username must be between 1 and 10 characters")
        if self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """Request body for sign-in."""

    username: str
    password: str


class TokenResponse(BaseModel):
    """Access token returned on sign-in."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")


class UserResponse(BaseModel):
    """Public user profile."""

    id: str
    username: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class PrincipalResponse(BaseModel):
    """Who the current request acts as."""

    user: UserResponse
    scope: str
    expires_at: datetime


class ShareResponse(BaseModel):
    """Freshly issued share link."""

    token: str
    url: str
    expires_at: datetime
