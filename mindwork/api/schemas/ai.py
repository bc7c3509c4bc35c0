from __future__ import annotations

from mindwork.api.schemas.common import CamelModel
from mindwork.domain.models import MonthlyReport


class RecommendationResponse(CamelModel):
    title: str
    description: str
    category: str


class MonthlyReportResponse(CamelModel):
    year: int
    month: int
    summary: str
    average_mood: float
    average_stress: float
    average_workload: float
    key_findings: list[str]
    suggested_actions: list[str]

    @classmethod
    def from_domain(cls, report: MonthlyReport) -> MonthlyReportResponse:
        return cls(
            year=report.year,
            month=report.month,
            summary=report.summary,
            average_mood=report.averages.mood,
            average_stress=report.averages.stress,
            average_workload=report.averages.workload,
            key_findings=report.key_findings,
            suggested_actions=report.suggested_actions,
        )
