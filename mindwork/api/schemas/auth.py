"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field

from mindwork.api.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    full_name: str = Field(..., min_length=1, max_length=128, description="User's full name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 characters)",
    )
    role: str = Field(
        ...,
        description="'Collaborator' or 'Manager' (case-insensitive)",
    )


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class AuthResponse(CamelModel):
    """Signed access token plus the caller's display data."""

    token: str = Field(..., description="JWT access token")
    full_name: str
    role: str
