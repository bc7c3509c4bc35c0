from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.api.deps import get_db_session, require_manager
from mindwork.api.schemas.dashboard import DashboardSummaryResponse
from mindwork.domain import Principal
from mindwork.domain.services.aggregation import AggregationService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def get_summary(
    days: int = Query(30, description="Lookback window, 1..365; other values fall back to 30"),
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(require_manager),
) -> DashboardSummaryResponse:
    """Anonymous averages and level distributions over recent self-assessments."""
    summary = await AggregationService(session).dashboard_summary(days)
    return DashboardSummaryResponse.from_domain(summary)
