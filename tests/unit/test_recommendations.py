from datetime import UTC, datetime, timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from mindwork.core.config import Settings
from mindwork.domain.reference_data import ONBOARDING_RECOMMENDATION, RULE_RECOMMENDATIONS
from mindwork.domain.services.recommendations import (
    ProviderRecommendationEngine,
    RuleBasedRecommendationEngine,
    build_recommendation_engine,
    parse_recommendations,
    strip_code_fence,
)
from mindwork.libs.genai_client import (
    GeminiClient,
    GenAIClientError,
    GenAIConfigError,
    GenAIEmptyResponseError,
    GenAIResponse,
    GenAIStatusError,
    GenAITransportError,
)
from tests.utils import add_assessment, create_user

NOW = datetime(2026, 5, 15, 12, tzinfo=UTC)


class FakeTextClient:
    def __init__(self, text: str = "", error: GenAIClientError | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> GenAIResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return GenAIResponse(text=self.text, model="fake", latency_ms=1, finish_reason="STOP")


@pytest.fixture()
async def user_id(db: AsyncSession) -> str:
    user = await create_user(db, email="ana@example.com")
    return user.id


async def _seed(db: AsyncSession, user_id: str, count: int = 1, **levels) -> None:
    values = {"mood": 3, "stress": 3, "workload": 3} | levels
    for index in range(count):
        await add_assessment(
            db, user_id, created_at=NOW - timedelta(days=1, minutes=index), **values
        )


def test_strip_code_fence() -> None:
    assert strip_code_fence('```json\n[{"a": 1}]\n```') == '[{"a": 1}]'
    assert strip_code_fence("```\nplain\n```") == "plain"
    assert strip_code_fence("  no fence  ") == "no fence"


def test_parse_recommendations_accepts_any_key_casing() -> None:
    parsed = parse_recommendations(
        '[{"Title": "Walk", "Description": "Take a walk", "Category": "Movement"}]'
    )

    assert [(r.title, r.description, r.category) for r in parsed] == [
        ("Walk", "Take a walk", "Movement")
    ]


def test_parse_recommendations_wraps_free_text() -> None:
    parsed = parse_recommendations("Drink more water and sleep well.")

    assert len(parsed) == 1
    assert parsed[0].title == "Recommendation"
    assert parsed[0].description == "Drink more water and sleep well."
    assert parsed[0].category == "general_advice"


async def test_provider_engine_without_data_returns_onboarding_without_calling(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    client = FakeTextClient(text="unused")

    result = await ProviderRecommendationEngine(db, settings, client=client).recommendations_for(
        user_id, NOW
    )

    assert [r.category for r in result] == [ONBOARDING_RECOMMENDATION["category"]]
    assert client.prompts == []


async def test_provider_engine_ignores_assessments_outside_window(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await add_assessment(
        db, user_id, mood=1, stress=5, workload=5, created_at=NOW - timedelta(days=45)
    )
    client = FakeTextClient(text="unused")

    result = await ProviderRecommendationEngine(db, settings, client=client).recommendations_for(
        user_id, NOW
    )

    assert result[0].category == "onboarding"
    assert client.prompts == []


async def test_provider_engine_decodes_fenced_json(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await _seed(db, user_id, mood=2, stress=5, workload=4)
    client = FakeTextClient(
        text=(
            "```json\n"
            '[{"title": "Breathe", "description": "Box breathing", "category": "stress"},'
            ' {"title": "Talk", "description": "Talk to your lead", "category": "workload"}]\n'
            "```"
        )
    )

    result = await ProviderRecommendationEngine(db, settings, client=client).recommendations_for(
        user_id, NOW
    )

    assert [r.title for r in result] == ["Breathe", "Talk"]
    assert len(client.prompts) == 1
    assert "Mood: 2 (Bad)" in client.prompts[0]
    assert "Stress: 5 (VeryHigh)" in client.prompts[0]


async def test_provider_engine_sends_at_most_five_newest_assessments(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await _seed(db, user_id, count=7)
    client = FakeTextClient(text="[]")

    await ProviderRecommendationEngine(db, settings, client=client).recommendations_for(
        user_id, NOW
    )

    lines = [line for line in client.prompts[0].splitlines() if line.startswith("- Mood")]
    assert len(lines) == 5


async def test_provider_engine_wraps_undecodable_answer(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await _seed(db, user_id)
    client = FakeTextClient(text="Take regular breaks.")

    result = await ProviderRecommendationEngine(db, settings, client=client).recommendations_for(
        user_id, NOW
    )

    assert [(r.title, r.category) for r in result] == [("Recommendation", "general_advice")]


@pytest.mark.parametrize(
    ("error", "title", "fragment"),
    [
        (GenAIConfigError("no key"), "Configuration error", "not configured"),
        (GenAITransportError("refused"), "Connection error", "Could not reach"),
        (GenAIStatusError("bad", status_code=503), "Provider error", "503"),
        (GenAIEmptyResponseError("nothing"), "Empty answer", "no text"),
    ],
)
async def test_provider_failures_become_diagnostics(
    db: AsyncSession, settings: Settings, user_id: str, error, title, fragment
) -> None:
    await _seed(db, user_id)
    client = FakeTextClient(error=error)

    result = await ProviderRecommendationEngine(db, settings, client=client).recommendations_for(
        user_id, NOW
    )

    assert len(result) == 1
    assert result[0].category == "debug_error"
    assert result[0].title == title
    assert fragment in result[0].description
    assert len(client.prompts) == 1


async def test_provider_engine_without_api_key_reports_configuration(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await _seed(db, user_id)
    no_key = settings.model_copy(update={"gemini_api_key": ""})

    result = await ProviderRecommendationEngine(db, no_key).recommendations_for(user_id, NOW)

    assert [(r.title, r.category) for r in result] == [("Configuration error", "debug_error")]


async def test_rule_engine_flags_high_stress_and_low_mood(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await _seed(db, user_id, count=2, mood=1, stress=5, workload=3)

    result = await RuleBasedRecommendationEngine(db, settings).recommendations_for(user_id, NOW)

    assert [r.category for r in result] == [
        RULE_RECOMMENDATIONS["high_stress"]["category"],
        RULE_RECOMMENDATIONS["low_mood"]["category"],
    ]


async def test_rule_engine_balanced_user_gets_maintenance(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    await _seed(db, user_id, mood=4, stress=2, workload=3)

    result = await RuleBasedRecommendationEngine(db, settings).recommendations_for(user_id, NOW)

    assert [r.category for r in result] == ["maintenance"]


async def test_rule_engine_without_data_returns_onboarding(
    db: AsyncSession, settings: Settings, user_id: str
) -> None:
    result = await RuleBasedRecommendationEngine(db, settings).recommendations_for(user_id, NOW)

    assert result[0].title == ONBOARDING_RECOMMENDATION["title"]


async def test_build_engine_selects_backend(db: AsyncSession, settings: Settings) -> None:
    rules = settings.model_copy(update={"recommendation_backend": "Rules"})
    provider = settings.model_copy(update={"recommendation_backend": "provider"})

    assert isinstance(build_recommendation_engine(db, rules), RuleBasedRecommendationEngine)
    assert isinstance(build_recommendation_engine(db, provider), ProviderRecommendationEngine)


@pytest.mark.parametrize(
    "body",
    [[1, 2], {"candidates": ["oops"]}, {"candidates": [{"content": ["x"]}]}],
)
async def test_malformed_provider_body_becomes_diagnostic(
    db: AsyncSession, settings: Settings, user_id: str, body
) -> None:
    await _seed(db, user_id)
    keyed = settings.model_copy(update={"gemini_api_key": "test-key"})
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    client = GeminiClient(keyed, transport=transport)
    engine = ProviderRecommendationEngine(db, keyed, client=client)

    result = await engine.recommendations_for(user_id, NOW)

    assert [(r.title, r.category) for r in result] == [("Empty answer", "debug_error")]
