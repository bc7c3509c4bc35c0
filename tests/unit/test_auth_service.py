import pytest
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.api.schemas.auth import RegisterRequest
from mindwork.core.auth import decode_access_token
from mindwork.core.config import Settings
from mindwork.domain.services.auth_service import (
    AuthService,
    InvalidCredentialsError,
    InvalidRoleError,
    UserExistsError,
    UserNotFoundError,
    hash_password,
    verify_password,
)
from mindwork.domain.services.users import parse_role_filter
from mindwork.infrastructure.db.models import UserRole


def test_password_hash_roundtrip() -> None:
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_register_request_accepts_camel_case_and_snake_case() -> None:
    camel = RegisterRequest.model_validate(
        {"fullName": "Ana", "email": "ana@example.com", "password": "longenough", "role": "x"}
    )
    snake = RegisterRequest.model_validate(
        {"full_name": "Ana", "email": "ana@example.com", "password": "longenough", "role": "x"}
    )

    assert camel.full_name == snake.full_name == "Ana"


def test_register_request_rejects_short_password_and_bad_email() -> None:
    with pytest.raises(ValidationError):
        RegisterRequest(full_name="Ana", email="ana@example.com", password="short", role="Manager")
    with pytest.raises(ValidationError):
        RegisterRequest(
            full_name="Ana", email="not-an-email", password="longenough", role="Manager"
        )


def test_parse_role_filter() -> None:
    assert parse_role_filter("manager") is UserRole.MANAGER
    assert parse_role_filter("Collaborator") is UserRole.COLLABORATOR
    assert parse_role_filter("janitor") is None
    assert parse_role_filter("  ") is None
    assert parse_role_filter(None) is None


async def test_register_then_login(db: AsyncSession, settings: Settings) -> None:
    service = AuthService(db, settings)

    registered = await service.register_user(
        full_name="Ana", email="ana@example.com", password="longenough", role="manager"
    )
    logged_in = await service.login(email="ana@example.com", password="longenough")

    assert registered["role"] == "Manager"
    assert logged_in["full_name"] == "Ana"
    claims = decode_access_token(logged_in["token"], settings=settings)
    assert claims["role"] == "Manager"
    assert claims["email"] == "ana@example.com"


async def test_register_rejects_unknown_role(db: AsyncSession, settings: Settings) -> None:
    with pytest.raises(InvalidRoleError):
        await AuthService(db, settings).register_user(
            full_name="Ana", email="ana@example.com", password="longenough", role="Admin"
        )


async def test_register_rejects_duplicate_email(db: AsyncSession, settings: Settings) -> None:
    service = AuthService(db, settings)
    await service.register_user(
        full_name="Ana", email="ana@example.com", password="longenough", role="Collaborator"
    )

    with pytest.raises(UserExistsError):
        await service.register_user(
            full_name="Ana Again", email="ana@example.com", password="longenough", role="Manager"
        )


async def test_login_failures_share_one_message(db: AsyncSession, settings: Settings) -> None:
    service = AuthService(db, settings)
    await service.register_user(
        full_name="Ana", email="ana@example.com", password="longenough", role="Collaborator"
    )

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await service.login(email="ana@example.com", password="not-the-password")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await service.login(email="nobody@example.com", password="longenough")

    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid email or password"


async def test_get_user_by_id_unknown(db: AsyncSession, settings: Settings) -> None:
    with pytest.raises(UserNotFoundError):
        await AuthService(db, settings).get_user_by_id("00000000-0000-0000-0000-000000000000")
