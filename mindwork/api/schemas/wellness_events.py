from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindwork.api.schemas.common import CamelModel


class WellnessEventCreate(CamelModel):
    user_id: UUID | None = None
    event_type: str = Field(
        ..., min_length=1, max_length=100, description="e.g. break, focus_session"
    )
    occurred_at: datetime | None = Field(default=None, description="Defaults to ingestion time")
    source: str | None = Field(default=None, max_length=100, description="Defaults to 'unknown'")
    value: float | None = None
    metadata_json: str | None = Field(default=None, description="Opaque JSON payload")


class WellnessEventResponse(CamelModel):
    id: str
    user_id: str | None = None
    event_type: str
    occurred_at: datetime
    source: str
    value: float | None = None
    metadata_json: str | None = None
