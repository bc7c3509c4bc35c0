from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.api.deps import CurrentUser, get_current_user, get_db_session
from mindwork.api.links import add_page_links
from mindwork.api.schemas.common import PagedResponse
from mindwork.api.schemas.self_assessments import SelfAssessmentRequest, SelfAssessmentResponse
from mindwork.domain.pagination import PageRequest
from mindwork.domain.services.self_assessments import (
    SelfAssessmentNotFoundError,
    SelfAssessmentService,
)

router = APIRouter(prefix="/selfassessments", tags=["Self-assessments"])


def _not_found(exc: SelfAssessmentNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post(
    "",
    response_model=SelfAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_self_assessment(
    payload: SelfAssessmentRequest,
    request: Request,
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> SelfAssessmentResponse:
    """Record a mood/stress/workload check-in for the caller."""
    created = await SelfAssessmentService(session).create(
        user_id=user.user_id,
        mood=payload.mood,
        stress=payload.stress,
        workload=payload.workload,
        notes=payload.notes,
    )
    response.headers["Location"] = str(
        request.url_for("get_self_assessment", assessment_id=created["id"])
    )
    return SelfAssessmentResponse(**created)


@router.get(
    "/my",
    response_model=PagedResponse[SelfAssessmentResponse],
    name="list_my_self_assessments",
)
async def list_my_self_assessments(
    request: Request,
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> PagedResponse[SelfAssessmentResponse]:
    """The caller's own assessments, newest first."""
    page = await SelfAssessmentService(session).list_for_owner(
        user.user_id, PageRequest.normalize(page_number, page_size)
    )
    add_page_links(page, request, "list_my_self_assessments")
    return PagedResponse[SelfAssessmentResponse].from_page(
        page, lambda item: SelfAssessmentResponse(**item)
    )


@router.get(
    "/{assessment_id}",
    response_model=SelfAssessmentResponse,
    name="get_self_assessment",
)
async def get_self_assessment(
    assessment_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> SelfAssessmentResponse:
    try:
        found = await SelfAssessmentService(session).get(str(assessment_id), user_id=user.user_id)
    except SelfAssessmentNotFoundError as exc:
        raise _not_found(exc) from exc
    return SelfAssessmentResponse(**found)


@router.put("/{assessment_id}", response_model=SelfAssessmentResponse)
async def update_self_assessment(
    assessment_id: UUID,
    payload: SelfAssessmentRequest,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> SelfAssessmentResponse:
    """Replace levels and notes of one of the caller's assessments."""
    try:
        updated = await SelfAssessmentService(session).update(
            str(assessment_id),
            user_id=user.user_id,
            mood=payload.mood,
            stress=payload.stress,
            workload=payload.workload,
            notes=payload.notes,
        )
    except SelfAssessmentNotFoundError as exc:
        raise _not_found(exc) from exc
    return SelfAssessmentResponse(**updated)


@router.delete(
    "/{assessment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_self_assessment(
    assessment_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> None:
    try:
        await SelfAssessmentService(session).delete(str(assessment_id), user_id=user.user_id)
    except SelfAssessmentNotFoundError as exc:
        raise _not_found(exc) from exc
