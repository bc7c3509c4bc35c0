from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.api.deps import get_db_session, get_principal, require_manager
from mindwork.api.links import add_page_links
from mindwork.api.schemas.common import PagedResponse
from mindwork.api.schemas.wellness_events import WellnessEventCreate, WellnessEventResponse
from mindwork.core.auth import resolve_user_id
from mindwork.domain import Principal
from mindwork.domain.pagination import DEFAULT_PAGE_SIZE, PageRequest
from mindwork.domain.services.auth_service import UserNotFoundError
from mindwork.domain.services.wellness_events import WellnessEventFilters, WellnessEventService

router = APIRouter(prefix="/wellnessevents", tags=["Wellness events"])


@router.post("", response_model=WellnessEventResponse, status_code=status.HTTP_201_CREATED)
async def create_wellness_event(
    payload: WellnessEventCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_db_session),
) -> WellnessEventResponse:
    """Ingest an event from the app, a wearable or another integration."""
    caller_id = resolve_user_id(principal)
    try:
        created = await WellnessEventService(session).create(
            event_type=payload.event_type,
            user_id=str(payload.user_id) if payload.user_id else None,
            caller_id=str(caller_id) if caller_id else None,
            occurred_at=payload.occurred_at,
            source=payload.source,
            value=payload.value,
            metadata_json=payload.metadata_json,
        )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    listing = request.url_for("list_wellness_events").include_query_params(
        pageNumber=1, pageSize=DEFAULT_PAGE_SIZE
    )
    response.headers["Location"] = str(listing)
    return WellnessEventResponse(**created)


@router.get(
    "",
    response_model=PagedResponse[WellnessEventResponse],
    name="list_wellness_events",
)
async def list_wellness_events(
    request: Request,
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    user_id: UUID | None = Query(None, alias="userId"),
    event_type: str | None = Query(None, alias="eventType"),
    source: str | None = Query(None),
    occurred_from: datetime | None = Query(None, alias="occurredFrom"),
    occurred_to: datetime | None = Query(None, alias="occurredTo"),
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(require_manager),
) -> PagedResponse[WellnessEventResponse]:
    """Filtered, paginated event listing, newest first (manager-only)."""
    filters = WellnessEventFilters(
        user_id=str(user_id) if user_id else None,
        event_type=event_type,
        source=source,
        occurred_from=occurred_from,
        occurred_to=occurred_to,
    )
    page = await WellnessEventService(session).list_events(
        filters, PageRequest.normalize(page_number, page_size)
    )
    add_page_links(
        page,
        request,
        "list_wellness_events",
        {
            "userId": user_id,
            "eventType": event_type,
            "source": source,
            "occurredFrom": occurred_from,
            "occurredTo": occurred_to,
        },
    )
    return PagedResponse[WellnessEventResponse].from_page(
        page, lambda item: WellnessEventResponse(**item)
    )
