"""Authentication service with password hashing and token issuance."""

from __future__ import annotations

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.core.auth import Role, create_access_token
from mindwork.core.config import Settings
from mindwork.infrastructure.db.models import UserModel, UserRole

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthError(Exception):
    """Base exception for authentication errors."""


class InvalidRoleError(AuthError):
    """Raised when registration names a role outside Collaborator/Manager."""


class UserExistsError(AuthError):
    """Raised when attempting to register with existing email."""


class InvalidCredentialsError(AuthError):
    """Raised for unknown email, inactive account or wrong password."""


class UserNotFoundError(AuthError):
    """Raised when user is not found."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(user: UserModel, settings: Settings) -> str:
    """Sign an access token carrying the user's identity and role claims."""
    return create_access_token(
        user.id,
        role=user.role.value,
        email=user.email,
        full_name=user.full_name,
        settings=settings,
    )


class AuthService:
    """Service for registration, login and profile lookups."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self.session = session
        self.settings = settings

    async def register_user(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        role: str,
    ) -> dict:
        """
        Register a new user.

        Returns:
            dict with token, full name and role
        """
        await logger.ainfo("register_attempt", email=email, role=role)

        try:
            user_role = UserRole(Role.parse(role).value)
        except ValueError as exc:
            raise InvalidRoleError("Invalid role. Use 'Collaborator' or 'Manager'.") from exc

        existing = await self.session.scalar(select(UserModel.id).where(UserModel.email == email))
        if existing is not None:
            await logger.awarning("register_duplicate_email", email=email)
            raise UserExistsError(f"User with email {email} already exists")

        user = UserModel(
            full_name=full_name,
            email=email,
            hashed_password=hash_password(password),
            role=user_role,
            is_active=True,
        )

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=email)
            raise UserExistsError(f"User with email {email} already exists") from exc

        await logger.ainfo("register_success", user_id=user.id, role=user.role.value)
        return self._auth_payload(user)

    async def login(self, *, email: str, password: str) -> dict:
        """Authenticate an active user by email and password."""
        await logger.ainfo("login_attempt", email=email)

        stmt = select(UserModel).where(UserModel.email == email, UserModel.is_active.is_(True))
        user = await self.session.scalar(stmt)

        if user is None:
            await logger.awarning("login_user_not_found", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        if not verify_password(password, user.hashed_password):
            await logger.awarning("login_invalid_password", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        await logger.ainfo("login_success", user_id=user.id)
        return self._auth_payload(user)

    async def get_user_by_id(self, user_id: str) -> dict:
        """Get user profile by ID."""
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user_to_dict(user)

    def _auth_payload(self, user: UserModel) -> dict:
        return {
            "token": issue_token(user, self.settings),
            "full_name": user.full_name,
            "role": user.role.value,
        }


def user_to_dict(user: UserModel) -> dict:
    """Convert UserModel to dict for response."""
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "role": user.role.value,
        "created_at": user.created_at,
        "is_active": user.is_active,
    }
