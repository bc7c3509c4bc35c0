from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.api.deps import (
    CurrentUser,
    get_current_user,
    get_db_session,
    get_recommendation_engine,
    require_manager,
)
from mindwork.api.schemas.ai import MonthlyReportResponse, RecommendationResponse
from mindwork.domain import Principal
from mindwork.domain.services.aggregation import AggregationService, InvalidReportPeriodError
from mindwork.domain.services.recommendations import RecommendationEngine

router = APIRouter(prefix="/ai", tags=["AI"])
logger = structlog.get_logger()


@router.get("/recommendations/me", response_model=list[RecommendationResponse])
async def get_my_recommendations(
    user: CurrentUser = Depends(get_current_user),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> list[RecommendationResponse]:
    """Personal recommendations from the caller's recent self-assessments."""
    recommendations = await engine.recommendations_for(user.user_id, datetime.now(UTC))
    return [
        RecommendationResponse(
            title=item.title,
            description=item.description,
            category=item.category,
        )
        for item in recommendations
    ]


@router.get("/monthly-report", response_model=MonthlyReportResponse)
async def get_monthly_report(
    year: int | None = Query(None),
    month: int | None = Query(None),
    session: AsyncSession = Depends(get_db_session),
    manager: Principal = Depends(require_manager),
) -> MonthlyReportResponse:
    """Emotional climate report for one calendar month (manager-only).

    Missing year or month default to the current UTC month.
    """
    now = datetime.now(UTC)
    report_year = year if year is not None else now.year
    report_month = month if month is not None else now.month

    try:
        report = await AggregationService(session).monthly_report(report_year, report_month)
    except InvalidReportPeriodError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info(
        "monthly_report_requested",
        year=report_year,
        month=report_month,
        requested_by=manager.subject,
    )
    return MonthlyReportResponse.from_domain(report)
