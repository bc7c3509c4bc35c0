from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.api.deps import CurrentUser, get_current_user, get_db_session, require_manager
from mindwork.api.links import add_page_links
from mindwork.api.schemas.common import PagedResponse
from mindwork.api.schemas.users import UpdateUserStatusRequest, UserListItem, UserProfileResponse
from mindwork.core.config import Settings, get_settings
from mindwork.domain import Principal
from mindwork.domain.pagination import PageRequest
from mindwork.domain.services.auth_service import AuthService, UserNotFoundError
from mindwork.domain.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserProfileResponse)
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> UserProfileResponse:
    """Get the authenticated user's profile."""
    try:
        profile = await AuthService(session, settings).get_user_by_id(user.user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return UserProfileResponse(**profile)


@router.get("", response_model=PagedResponse[UserListItem], name="list_users")
async def list_users(
    request: Request,
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    role: str | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(require_manager),
) -> PagedResponse[UserListItem]:
    """List users with pagination (manager-only)."""
    page = await UserService(session).list_users(
        PageRequest.normalize(page_number, page_size),
        role=role,
        is_active=is_active,
    )
    add_page_links(page, request, "list_users", {"role": role, "isActive": is_active})
    return PagedResponse[UserListItem].from_page(page, lambda item: UserListItem(**item))


@router.put(
    "/{user_id}/status",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def update_user_status(
    user_id: UUID,
    payload: UpdateUserStatusRequest,
    session: AsyncSession = Depends(get_db_session),
    manager: Principal = Depends(require_manager),
) -> None:
    """Activate or deactivate a user (manager-only)."""
    try:
        await UserService(session).set_status(
            str(user_id),
            is_active=payload.is_active,
            changed_by=manager.subject,
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
