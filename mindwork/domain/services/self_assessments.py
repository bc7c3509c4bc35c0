from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.domain.models import MoodLevel, StressLevel, WorkloadLevel
from mindwork.domain.pagination import Page, PageRequest, paginate
from mindwork.infrastructure.db.models import SelfAssessment

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()


class SelfAssessmentNotFoundError(Exception):
    """Raised when an assessment does not exist or belongs to someone else."""


def assessment_to_dict(assessment: SelfAssessment) -> dict[str, Any]:
    return {
        "id": assessment.id,
        "created_at": assessment.created_at,
        "mood": MoodLevel(assessment.mood),
        "stress": StressLevel(assessment.stress),
        "workload": WorkloadLevel(assessment.workload),
        "notes": assessment.notes,
    }


class SelfAssessmentService:
    """Owner-scoped CRUD for self-assessments.

    Every lookup filters by owner, so another user's record is reported as
    missing rather than forbidden.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        user_id: str,
        mood: MoodLevel,
        stress: StressLevel,
        workload: WorkloadLevel,
        notes: str | None = None,
    ) -> dict[str, Any]:
        assessment = SelfAssessment(
            user_id=user_id,
            mood=int(mood),
            stress=int(stress),
            workload=int(workload),
            notes=notes,
        )
        self.session.add(assessment)
        await self.session.commit()
        await self.session.refresh(assessment)

        await logger.ainfo("self_assessment_created", assessment_id=assessment.id, user_id=user_id)
        return assessment_to_dict(assessment)

    async def get(self, assessment_id: str, *, user_id: str) -> dict[str, Any]:
        return assessment_to_dict(await self._get_owned(assessment_id, user_id))

    async def list_for_owner(self, user_id: str, request: PageRequest) -> Page[dict[str, Any]]:
        stmt: Select[tuple[SelfAssessment]] = (
            select(SelfAssessment)
            .where(SelfAssessment.user_id == user_id)
            .order_by(SelfAssessment.created_at.desc(), SelfAssessment.id.desc())
        )
        page = await paginate(self.session, stmt, request)
        page.items = [assessment_to_dict(item) for item in page.items]
        return page

    async def update(
        self,
        assessment_id: str,
        *,
        user_id: str,
        mood: MoodLevel,
        stress: StressLevel,
        workload: WorkloadLevel,
        notes: str | None = None,
    ) -> dict[str, Any]:
        assessment = await self._get_owned(assessment_id, user_id)

        assessment.mood = int(mood)
        assessment.stress = int(stress)
        assessment.workload = int(workload)
        assessment.notes = notes
        await self.session.commit()
        await self.session.refresh(assessment)

        await logger.ainfo("self_assessment_updated", assessment_id=assessment_id, user_id=user_id)
        return assessment_to_dict(assessment)

    async def delete(self, assessment_id: str, *, user_id: str) -> None:
        assessment = await self._get_owned(assessment_id, user_id)
        await self.session.delete(assessment)
        await self.session.commit()

        await logger.ainfo("self_assessment_deleted", assessment_id=assessment_id, user_id=user_id)

    async def _get_owned(self, assessment_id: str, user_id: str) -> SelfAssessment:
        stmt: Select[tuple[SelfAssessment]] = select(SelfAssessment).where(
            SelfAssessment.id == assessment_id,
            SelfAssessment.user_id == user_id,
        )
        assessment = await self.session.scalar(stmt)
        if assessment is None:
            raise SelfAssessmentNotFoundError(f"Self-assessment {assessment_id} not found")
        return assessment
