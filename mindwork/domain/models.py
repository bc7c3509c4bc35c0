from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class MoodLevel(IntEnum):
    VERY_BAD = 1
    BAD = 2
    NEUTRAL = 3
    GOOD = 4
    VERY_GOOD = 5


class StressLevel(IntEnum):
    VERY_LOW = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4
    VERY_HIGH = 5


class WorkloadLevel(IntEnum):
    VERY_LOW = 1
    LOW = 2
    BALANCED = 3
    HIGH = 4
    OVERLOADED = 5


def level_label(level: IntEnum) -> str:
    """Render VERY_GOOD as VeryGood."""
    return "".join(part.capitalize() for part in level.name.split("_"))


@dataclass(slots=True)
class Principal:
    """Represents the verified caller behind a bearer token."""

    subject: str | None
    role: str | None
    email: str = ""
    full_name: str = ""


@dataclass(slots=True)
class Recommendation:
    title: str
    description: str
    category: str


@dataclass(slots=True)
class LevelAverages:
    """Mean rank of each scale, rounded to two decimals."""

    mood: float = 0.0
    stress: float = 0.0
    workload: float = 0.0


@dataclass(slots=True)
class LevelCount:
    level: int
    label: str
    count: int


@dataclass(slots=True)
class DashboardSummary:
    period_days: int
    total_assessments: int
    averages: LevelAverages = field(default_factory=LevelAverages)
    mood_distribution: list[LevelCount] = field(default_factory=list)
    stress_distribution: list[LevelCount] = field(default_factory=list)
    workload_distribution: list[LevelCount] = field(default_factory=list)


@dataclass(slots=True)
class MonthlyReport:
    year: int
    month: int
    summary: str
    averages: LevelAverages = field(default_factory=LevelAverages)
    key_findings: list[str] = field(default_factory=list)
    suggested_actions: list[str] = field(default_factory=list)
