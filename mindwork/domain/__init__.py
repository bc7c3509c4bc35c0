from mindwork.domain.models import (
    DashboardSummary,
    LevelAverages,
    LevelCount,
    MonthlyReport,
    MoodLevel,
    Principal,
    Recommendation,
    StressLevel,
    WorkloadLevel,
)

__all__ = [
    "DashboardSummary",
    "LevelAverages",
    "LevelCount",
    "MonthlyReport",
    "MoodLevel",
    "Principal",
    "Recommendation",
    "StressLevel",
    "WorkloadLevel",
]
