"""
Aggregations over self-assessments for the manager dashboard and the
monthly emotional climate report.

Only counts and averages leave this module; no per-user identity does.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from enum import IntEnum
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.domain.models import (
    DashboardSummary,
    LevelAverages,
    LevelCount,
    MonthlyReport,
    MoodLevel,
    StressLevel,
    WorkloadLevel,
    level_label,
)
from mindwork.domain.reference_data import (
    REPORT_ACTIONS,
    REPORT_FINDING_TEMPLATES,
    REPORT_NO_DATA_FINDINGS,
    REPORT_NO_DATA_SUMMARY,
    REPORT_SUMMARY_TEMPLATE,
)
from mindwork.infrastructure.db.models import SelfAssessment

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

logger = structlog.get_logger()

DEFAULT_LOOKBACK_DAYS = 30
MAX_LOOKBACK_DAYS = 365

_LEVEL_COLUMNS: dict[str, tuple[Any, type[IntEnum]]] = {
    "mood": (SelfAssessment.mood, MoodLevel),
    "stress": (SelfAssessment.stress, StressLevel),
    "workload": (SelfAssessment.workload, WorkloadLevel),
}


class InvalidReportPeriodError(ValueError):
    """Raised when a monthly report is requested for an impossible month."""


def clamp_lookback_days(days: int | None) -> int:
    """Days outside 1..365 fall back to 30."""
    if days is None or days <= 0 or days > MAX_LOOKBACK_DAYS:
        return DEFAULT_LOOKBACK_DAYS
    return days


def lookback_start(now: datetime, days: int) -> datetime:
    """Midnight UTC, ``days`` days before today."""
    today = now.astimezone(UTC).date()
    return datetime.combine(today - timedelta(days=days), time.min, tzinfo=UTC)


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open UTC range [first of month, first of next month)."""
    if not 1 <= month <= 12:
        raise InvalidReportPeriodError("Month must be between 1 and 12.")
    if not 1 <= year < 9999:
        raise InvalidReportPeriodError("Year is out of range.")

    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return (
        datetime.combine(start, time.min, tzinfo=UTC),
        datetime.combine(end, time.min, tzinfo=UTC),
    )


def threshold_flags(averages: LevelAverages) -> list[str]:
    """Names of the wellbeing thresholds crossed by the given means, in fixed order."""
    flags: list[str] = []
    if averages.stress >= StressLevel.HIGH:
        flags.append("high_stress")
    if averages.workload >= WorkloadLevel.HIGH:
        flags.append("high_workload")
    if averages.mood <= MoodLevel.BAD:
        flags.append("low_mood")
    return flags


def build_suggested_actions(averages: LevelAverages) -> list[str]:
    flags = threshold_flags(averages) or ["maintenance"]
    actions: list[str] = []
    for flag in flags:
        actions.extend(REPORT_ACTIONS[flag])
    return actions


def build_key_findings(averages: LevelAverages) -> list[str]:
    return [
        REPORT_FINDING_TEMPLATES["mood"].format(value=averages.mood),
        REPORT_FINDING_TEMPLATES["stress"].format(value=averages.stress),
        REPORT_FINDING_TEMPLATES["workload"].format(value=averages.workload),
    ]


class AggregationService:
    """Computes averages and level distributions over filtered assessments."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def dashboard_summary(
        self, days: int | None = None, *, now: datetime | None = None
    ) -> DashboardSummary:
        period_days = clamp_lookback_days(days)
        since = lookback_start(now or datetime.now(UTC), period_days)
        conditions = [SelfAssessment.created_at >= since]

        total, averages = await self.averages(conditions)
        if total == 0:
            return DashboardSummary(period_days=period_days, total_assessments=0)

        summary = DashboardSummary(
            period_days=period_days,
            total_assessments=total,
            averages=averages,
            mood_distribution=await self.distribution("mood", conditions),
            stress_distribution=await self.distribution("stress", conditions),
            workload_distribution=await self.distribution("workload", conditions),
        )
        await logger.ainfo("dashboard_summary_built", period_days=period_days, total=total)
        return summary

    async def monthly_report(self, year: int, month: int) -> MonthlyReport:
        start, end = month_range(year, month)
        conditions = [SelfAssessment.created_at >= start, SelfAssessment.created_at < end]

        total, averages = await self.averages(conditions)
        if total == 0:
            return MonthlyReport(
                year=year,
                month=month,
                summary=REPORT_NO_DATA_SUMMARY,
                key_findings=list(REPORT_NO_DATA_FINDINGS),
            )

        report = MonthlyReport(
            year=year,
            month=month,
            summary=REPORT_SUMMARY_TEMPLATE.format(year=year, month=month, count=total),
            averages=averages,
            key_findings=build_key_findings(averages),
            suggested_actions=build_suggested_actions(averages),
        )
        await logger.ainfo(
            "monthly_report_built",
            year=year,
            month=month,
            total=total,
            flags=threshold_flags(averages),
        )
        return report

    async def averages(
        self, conditions: list[ColumnElement[bool]]
    ) -> tuple[int, LevelAverages]:
        """Count matching assessments and average each scale's rank."""
        stmt = select(
            func.count(SelfAssessment.id),
            func.avg(SelfAssessment.mood),
            func.avg(SelfAssessment.stress),
            func.avg(SelfAssessment.workload),
        ).where(*conditions)
        total, mood, stress, workload = (await self.session.execute(stmt)).one()

        if not total:
            return 0, LevelAverages()
        return total, LevelAverages(
            mood=round(float(mood), 2),
            stress=round(float(stress), 2),
            workload=round(float(workload), 2),
        )

    async def distribution(
        self, scale: str, conditions: list[ColumnElement[bool]]
    ) -> list[LevelCount]:
        """Count per level actually present; absent levels are omitted."""
        column, enum_cls = _LEVEL_COLUMNS[scale]
        stmt = (
            select(column, func.count())
            .where(*conditions)
            .group_by(column)
            .order_by(column)
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            LevelCount(level=int(level), label=level_label(enum_cls(level)), count=count)
            for level, count in rows
        ]
