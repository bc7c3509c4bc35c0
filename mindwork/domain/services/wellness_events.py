from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.domain.pagination import Page, PageRequest, paginate
from mindwork.domain.services.auth_service import UserNotFoundError
from mindwork.infrastructure.db.models import UserModel, WellnessEvent

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()

UNKNOWN_SOURCE = "unknown"


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class WellnessEventFilters:
    user_id: str | None = None
    event_type: str | None = None
    source: str | None = None
    occurred_from: datetime | None = None
    occurred_to: datetime | None = None


def event_to_dict(event: WellnessEvent) -> dict[str, Any]:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "event_type": event.event_type,
        "occurred_at": event.occurred_at,
        "source": event.source,
        "value": event.value,
        "metadata_json": event.metadata_json,
    }


class WellnessEventService:
    """Ingestion and manager listing of wellness events."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        event_type: str,
        user_id: str | None = None,
        caller_id: str | None = None,
        occurred_at: datetime | None = None,
        source: str | None = None,
        value: float | None = None,
        metadata_json: str | None = None,
    ) -> dict[str, Any]:
        """Record an event.

        An explicit ``user_id`` must exist. Otherwise the caller is used when
        known to the store, and the event stays unattributed when not.
        """
        owner_id: str | None = None
        if user_id is not None:
            if await self.session.get(UserModel, user_id) is None:
                raise UserNotFoundError(f"User {user_id} not found")
            owner_id = user_id
        elif caller_id is not None and await self.session.get(UserModel, caller_id) is not None:
            owner_id = caller_id

        event = WellnessEvent(
            user_id=owner_id,
            event_type=event_type,
            occurred_at=as_utc(occurred_at) or datetime.now(UTC),
            source=source.strip() if source and source.strip() else UNKNOWN_SOURCE,
            value=value,
            metadata_json=metadata_json,
        )
        self.session.add(event)
        await self.session.commit()
        await self.session.refresh(event)

        await logger.ainfo(
            "wellness_event_created",
            event_id=event.id,
            event_type=event.event_type,
            source=event.source,
            attributed=owner_id is not None,
        )
        return event_to_dict(event)

    async def list_events(
        self, filters: WellnessEventFilters, request: PageRequest
    ) -> Page[dict[str, Any]]:
        stmt: Select[tuple[WellnessEvent]] = select(WellnessEvent)

        if filters.user_id is not None:
            stmt = stmt.where(WellnessEvent.user_id == filters.user_id)
        if filters.event_type and filters.event_type.strip():
            stmt = stmt.where(WellnessEvent.event_type == filters.event_type)
        if filters.source and filters.source.strip():
            stmt = stmt.where(WellnessEvent.source == filters.source)
        if filters.occurred_from is not None:
            stmt = stmt.where(WellnessEvent.occurred_at >= as_utc(filters.occurred_from))
        if filters.occurred_to is not None:
            stmt = stmt.where(WellnessEvent.occurred_at <= as_utc(filters.occurred_to))

        stmt = stmt.order_by(WellnessEvent.occurred_at.desc(), WellnessEvent.id.desc())
        page = await paginate(self.session, stmt, request)
        page.items = [event_to_dict(event) for event in page.items]
        return page
