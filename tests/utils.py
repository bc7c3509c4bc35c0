from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.core.auth import Role, create_access_token, decode_access_token
from mindwork.core.config import get_settings
from mindwork.infrastructure.db.models import SelfAssessment, UserModel, UserRole

API = "/api/v1"
DEFAULT_PASSWORD = "Sup3rSecret!"


@dataclass
class TestAccount:
    __test__ = False

    user_id: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return auth_headers(self.token)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_for(subject: str, role: Role = Role.COLLABORATOR) -> str:
    return create_access_token(subject, role=role, settings=get_settings())


async def register_account(
    client: AsyncClient,
    *,
    email: str,
    full_name: str,
    role: str,
    password: str = DEFAULT_PASSWORD,
) -> TestAccount:
    response = await client.post(
        f"{API}/auth/register",
        json={"fullName": full_name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 200, response.text
    token = response.json()["token"]
    claims = decode_access_token(token, settings=get_settings())
    return TestAccount(user_id=claims["sub"], email=email, token=token)


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    full_name: str = "Seeded User",
    role: UserRole = UserRole.COLLABORATOR,
    is_active: bool = True,
) -> UserModel:
    """Insert a user directly; the password hash is a placeholder."""
    user = UserModel(
        full_name=full_name,
        email=email,
        hashed_password="not-a-real-hash",
        role=role,
        is_active=is_active,
    )
    session.add(user)
    await session.commit()
    return user


async def add_assessment(
    session: AsyncSession,
    user_id: str,
    *,
    mood: int,
    stress: int,
    workload: int,
    created_at: datetime | None = None,
    notes: str | None = None,
) -> SelfAssessment:
    assessment = SelfAssessment(
        user_id=user_id, mood=mood, stress=stress, workload=workload, notes=notes
    )
    if created_at is not None:
        assessment.created_at = created_at
    session.add(assessment)
    await session.commit()
    return assessment
