from __future__ import annotations

from datetime import datetime

from mindwork.api.schemas.common import CamelModel


class UserProfileResponse(CamelModel):
    id: str
    full_name: str
    email: str
    role: str
    created_at: datetime
    is_active: bool


class UserListItem(CamelModel):
    id: str
    full_name: str
    email: str
    role: str
    is_active: bool


class UpdateUserStatusRequest(CamelModel):
    is_active: bool
