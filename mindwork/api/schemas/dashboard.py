from __future__ import annotations

from mindwork.api.schemas.common import CamelModel
from mindwork.domain.models import DashboardSummary, LevelCount


class LevelCountResponse(CamelModel):
    level: int
    label: str
    count: int

    @classmethod
    def from_domain(cls, item: LevelCount) -> LevelCountResponse:
        return cls(level=item.level, label=item.label, count=item.count)


class DashboardSummaryResponse(CamelModel):
    period_days: int
    total_assessments: int
    average_mood: float
    average_stress: float
    average_workload: float
    mood_distribution: list[LevelCountResponse]
    stress_distribution: list[LevelCountResponse]
    workload_distribution: list[LevelCountResponse]

    @classmethod
    def from_domain(cls, summary: DashboardSummary) -> DashboardSummaryResponse:
        return cls(
            period_days=summary.period_days,
            total_assessments=summary.total_assessments,
            average_mood=summary.averages.mood,
            average_stress=summary.averages.stress,
            average_workload=summary.averages.workload,
            mood_distribution=[
                LevelCountResponse.from_domain(i) for i in summary.mood_distribution
            ],
            stress_distribution=[
                LevelCountResponse.from_domain(i) for i in summary.stress_distribution
            ],
            workload_distribution=[
                LevelCountResponse.from_domain(i) for i in summary.workload_distribution
            ],
        )
