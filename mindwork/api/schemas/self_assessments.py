from __future__ import annotations

from datetime import datetime

from pydantic import Field

from mindwork.api.schemas.common import CamelModel
from mindwork.domain.models import MoodLevel, StressLevel, WorkloadLevel
from mindwork.infrastructure.db.models import NOTES_MAX_LENGTH


class SelfAssessmentRequest(CamelModel):
    """Body for creating or replacing a self-assessment. Levels are ranks 1..5."""

    mood: MoodLevel
    stress: StressLevel
    workload: WorkloadLevel
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)


class SelfAssessmentResponse(CamelModel):
    id: str
    created_at: datetime
    mood: MoodLevel
    stress: StressLevel
    workload: WorkloadLevel
    notes: str | None = None
