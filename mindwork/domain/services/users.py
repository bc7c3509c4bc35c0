from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.core.auth import Role
from mindwork.domain.pagination import Page, PageRequest, paginate
from mindwork.domain.services.auth_service import UserNotFoundError, user_to_dict
from mindwork.infrastructure.db.models import UserModel, UserRole

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()


def parse_role_filter(role: str | None) -> UserRole | None:
    """Case-insensitive role filter; unknown values mean no filter."""
    if not role or not role.strip():
        return None
    try:
        return UserRole(Role.parse(role).value)
    except ValueError:
        return None


class UserService:
    """Manager-facing user administration."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_users(
        self,
        request: PageRequest,
        *,
        role: str | None = None,
        is_active: bool | None = None,
    ) -> Page[dict]:
        stmt: Select[tuple[UserModel]] = select(UserModel)

        role_filter = parse_role_filter(role)
        if role_filter is not None:
            stmt = stmt.where(UserModel.role == role_filter)
        if is_active is not None:
            stmt = stmt.where(UserModel.is_active.is_(is_active))

        stmt = stmt.order_by(UserModel.full_name, UserModel.id)
        page = await paginate(self.session, stmt, request)
        page.items = [user_to_dict(user) for user in page.items]
        return page

    async def set_status(self, user_id: str, *, is_active: bool, changed_by: str | None) -> None:
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        user.is_active = is_active
        await self.session.commit()

        await logger.ainfo(
            "user_status_changed",
            user_id=user_id,
            is_active=is_active,
            changed_by=changed_by,
        )
