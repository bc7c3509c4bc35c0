"""
Personal wellbeing recommendations built from a user's recent self-assessments.

Two engines share one interface: a provider-backed engine that asks the
text-generation provider for advice, and a local rule-based engine. Both
always return at least one recommendation and never raise provider errors.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.core.config import Settings
from mindwork.domain.models import (
    LevelAverages,
    MoodLevel,
    Recommendation,
    StressLevel,
    WorkloadLevel,
    level_label,
)
from mindwork.domain.reference_data import (
    DIAGNOSTIC_CATEGORY,
    ONBOARDING_RECOMMENDATION,
    PROVIDER_DIAGNOSTICS,
    RAW_TEXT_CATEGORY,
    RAW_TEXT_TITLE,
    RECOMMENDATION_PROMPT_FOOTER,
    RECOMMENDATION_PROMPT_HEADER,
    RULE_RECOMMENDATIONS,
)
from mindwork.domain.services.aggregation import lookback_start, threshold_flags
from mindwork.infrastructure.db.models import SelfAssessment
from mindwork.libs.genai_client import (
    GeminiClient,
    GenAIClientError,
    GenAIConfigError,
    GenAIEmptyResponseError,
    GenAIStatusError,
    TextGenerationClientProtocol,
)

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger(__name__)

RULES_BACKEND = "rules"


class RecommendationEngine(Protocol):
    async def recommendations_for(self, user_id: str, as_of: datetime) -> list[Recommendation]:
        """Return at least one recommendation for the user as of the given instant."""
        ...


def onboarding() -> list[Recommendation]:
    return [Recommendation(**ONBOARDING_RECOMMENDATION)]


async def recent_assessments(
    session: AsyncSession,
    user_id: str,
    *,
    as_of: datetime,
    days: int,
    limit: int | None = None,
) -> list[SelfAssessment]:
    """Assessments since midnight UTC ``days`` days before ``as_of``, newest first."""
    since = lookback_start(as_of, days)
    stmt: Select[tuple[SelfAssessment]] = (
        select(SelfAssessment)
        .where(
            SelfAssessment.user_id == user_id,
            SelfAssessment.created_at >= since,
            SelfAssessment.created_at <= as_of,
        )
        .order_by(SelfAssessment.created_at.desc(), SelfAssessment.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return list((await session.execute(stmt)).scalars().all())


def average_levels(assessments: list[SelfAssessment]) -> LevelAverages:
    count = len(assessments)
    if count == 0:
        return LevelAverages()
    return LevelAverages(
        mood=round(sum(a.mood for a in assessments) / count, 2),
        stress=round(sum(a.stress for a in assessments) / count, 2),
        workload=round(sum(a.workload for a in assessments) / count, 2),
    )


class RuleBasedRecommendationEngine:
    """Deterministic advice from the lookback-window means."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self.session = session
        self.lookback_days = settings.recommendation_lookback_days

    async def recommendations_for(self, user_id: str, as_of: datetime) -> list[Recommendation]:
        assessments = await recent_assessments(
            self.session, user_id, as_of=as_of, days=self.lookback_days
        )
        if not assessments:
            return onboarding()

        flags = threshold_flags(average_levels(assessments)) or ["maintenance"]
        return [Recommendation(**RULE_RECOMMENDATIONS[flag]) for flag in flags]


def build_prompt(assessments: list[SelfAssessment]) -> str:
    lines = list(RECOMMENDATION_PROMPT_HEADER)
    for assessment in assessments:
        mood = MoodLevel(assessment.mood)
        stress = StressLevel(assessment.stress)
        workload = WorkloadLevel(assessment.workload)
        lines.append(
            f"- Mood: {int(mood)} ({level_label(mood)}), "
            f"Stress: {int(stress)} ({level_label(stress)}), "
            f"Workload: {int(workload)} ({level_label(workload)}), "
            f"Notes: {assessment.notes or '-'}"
        )
    lines.extend(RECOMMENDATION_PROMPT_FOOTER)
    return "\n".join(lines)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence such as ```json ... ```."""
    content = text.strip()
    if content.startswith("```"):
        lines = content.split("\n")[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        content = "\n".join(lines).strip()
    return content


def _field(item: dict[str, Any], name: str) -> str:
    # Providers are inconsistent about key casing ("Title" vs "title")
    for key, value in item.items():
        if isinstance(key, str) and key.lower() == name:
            return "" if value is None else str(value)
    return ""


def parse_recommendations(text: str) -> list[Recommendation]:
    """Decode the provider's JSON array, or wrap the raw text as one item."""
    content = strip_code_fence(text)
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, list) and data and all(isinstance(item, dict) for item in data):
        return [
            Recommendation(
                title=_field(item, "title"),
                description=_field(item, "description"),
                category=_field(item, "category") or RAW_TEXT_CATEGORY,
            )
            for item in data
        ]
    return [Recommendation(title=RAW_TEXT_TITLE, description=content, category=RAW_TEXT_CATEGORY)]


def diagnostic(kind: str, **details: Any) -> list[Recommendation]:
    title, description = PROVIDER_DIAGNOSTICS[kind]
    return [
        Recommendation(
            title=title,
            description=description.format(**details),
            category=DIAGNOSTIC_CATEGORY,
        )
    ]


class ProviderRecommendationEngine:
    """Forwards the newest assessments to the text-generation provider."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        client: TextGenerationClientProtocol | None = None,
    ) -> None:
        self.session = session
        self.lookback_days = settings.recommendation_lookback_days
        self.max_assessments = settings.recommendation_max_assessments
        self.client = client or GeminiClient(settings)

    async def recommendations_for(self, user_id: str, as_of: datetime) -> list[Recommendation]:
        assessments = await recent_assessments(
            self.session,
            user_id,
            as_of=as_of,
            days=self.lookback_days,
            limit=self.max_assessments,
        )
        if not assessments:
            return onboarding()

        try:
            response = await self.client.generate(build_prompt(assessments))
        except GenAIConfigError:
            await logger.awarning("recommendation_provider_unconfigured", user_id=user_id)
            return diagnostic("config_missing")
        except GenAIStatusError as exc:
            await logger.awarning(
                "recommendation_provider_error", user_id=user_id, status_code=exc.status_code
            )
            return diagnostic("status", status=exc.status_code)
        except GenAIEmptyResponseError:
            await logger.awarning("recommendation_provider_empty", user_id=user_id)
            return diagnostic("empty")
        except GenAIClientError as exc:
            await logger.awarning(
                "recommendation_provider_unreachable", user_id=user_id, error=str(exc)
            )
            return diagnostic("transport")

        recommendations = parse_recommendations(response.text)
        await logger.ainfo(
            "recommendations_generated",
            user_id=user_id,
            count=len(recommendations),
            model=response.model,
            latency_ms=response.latency_ms,
        )
        return recommendations


def build_recommendation_engine(
    session: AsyncSession,
    settings: Settings,
    client: TextGenerationClientProtocol | None = None,
) -> RecommendationEngine:
    """Pick the configured engine; unknown values use the provider engine."""
    if settings.recommendation_backend.lower() == RULES_BACKEND:
        return RuleBasedRecommendationEngine(session, settings)
    return ProviderRecommendationEngine(session, settings, client=client)
