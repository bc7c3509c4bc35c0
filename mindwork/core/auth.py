from __future__ import annotations

import uuid
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt

from mindwork.core.config import Settings
from mindwork.domain.models import Principal

# Claim used by identity providers that do not emit "sub"
NAME_IDENTIFIER_CLAIM = "nameid"


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class Role(str, Enum):
    COLLABORATOR = "Collaborator"
    MANAGER = "Manager"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}

    @classmethod
    def parse(cls, value: str) -> Role:
        """Case-insensitive lookup by role name."""
        normalized = (value or "").strip().lower()
        for role in cls:
            if role.value.lower() == normalized:
                return role
        raise ValueError(f"Unsupported role: {value}")


def create_access_token(
    subject: str,
    *,
    role: str,
    settings: Settings,
    email: str | None = None,
    full_name: str | None = None,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    """Generate a signed JWT access token."""
    if not Role.contains(role):
        raise TokenError(f"Unsupported role: {role}")

    issued_at = now or datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    payload: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "iat": int(issued_at.timestamp()),
        "nbf": int(issued_at.timestamp()),
        "exp": int((issued_at + ttl).timestamp()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }

    if email:
        payload["email"] = email
    if full_name:
        payload["full_name"] = full_name

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, *, settings: Settings) -> dict[str, Any]:
    """Decode and validate a JWT access token.

    Signature, expiry, not-before, issuer and audience are all checked.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "nbf", "iss", "aud", "role"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token has expired") from exc
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    if not Role.contains(payload.get("role", "")):
        raise TokenError(f"Unsupported role: {payload.get('role')}")
    return payload


def principal_from_claims(claims: Mapping[str, Any]) -> Principal:
    subject = claims.get("sub") or claims.get(NAME_IDENTIFIER_CLAIM)
    return Principal(
        subject=str(subject) if subject else None,
        role=claims.get("role"),
        email=claims.get("email", ""),
        full_name=claims.get("full_name", ""),
    )


def resolve_user_id(principal: Principal) -> uuid.UUID | None:
    """Return the caller's identity, or None when the subject is not a UUID."""
    if not principal.subject:
        return None
    try:
        return uuid.UUID(principal.subject)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class AuthorizationResult:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> AuthorizationResult:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> AuthorizationResult:
        return cls(allowed=False, reason=reason)


def authorize(principal: Principal, required_roles: Collection[Role] = ()) -> AuthorizationResult:
    """Check the caller's role against an operation's requirement.

    An empty requirement only needs a verified token.
    """
    if not required_roles:
        return AuthorizationResult.allow()
    if principal.role in {role.value for role in required_roles}:
        return AuthorizationResult.allow()
    return AuthorizationResult.deny("Insufficient role privileges")
