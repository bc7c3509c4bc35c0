from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.core.auth import (
    Role,
    TokenError,
    authorize,
    decode_access_token,
    principal_from_claims,
    resolve_user_id,
)
from mindwork.core.config import Settings, get_settings
from mindwork.domain import Principal
from mindwork.domain.services.recommendations import (
    RecommendationEngine,
    build_recommendation_engine,
)
from mindwork.infrastructure.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(slots=True)
class CurrentUser:
    """Authenticated caller whose subject resolved to a user identity."""

    user_id: str
    principal: Principal


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> Principal:
    """Verify the bearer token and expose its claims."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        claims = decode_access_token(credentials.credentials, settings=settings)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    return principal_from_claims(claims)


async def get_current_user(
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> CurrentUser:
    """Resolve the caller's identity from the subject claim."""
    user_id = resolve_user_id(principal)
    if user_id is None:
        raise _unauthorized("Token subject is not a valid user identity")
    return CurrentUser(user_id=str(user_id), principal=principal)


def require_roles(required_roles: Sequence[Role]) -> Callable[..., Principal]:
    """Dependency factory enforcing that the caller holds one of the required roles."""
    required = tuple(required_roles)

    def dependency(principal: Principal = Depends(get_principal)) -> Principal:  # noqa: B008
        result = authorize(principal, required)
        if not result.allowed:
            raise _forbidden(result.reason or "Forbidden")
        return principal

    return dependency


require_manager = require_roles([Role.MANAGER])


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_recommendation_engine(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> RecommendationEngine:
    return build_recommendation_engine(session, settings)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
