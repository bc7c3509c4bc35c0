"""Domain services."""

from mindwork.domain.services.aggregation import AggregationService, InvalidReportPeriodError
from mindwork.domain.services.auth_service import AuthService
from mindwork.domain.services.recommendations import (
    ProviderRecommendationEngine,
    RecommendationEngine,
    RuleBasedRecommendationEngine,
    build_recommendation_engine,
)
from mindwork.domain.services.self_assessments import (
    SelfAssessmentNotFoundError,
    SelfAssessmentService,
)
from mindwork.domain.services.users import UserService
from mindwork.domain.services.wellness_events import WellnessEventFilters, WellnessEventService

__all__ = [
    "AggregationService",
    "AuthService",
    "InvalidReportPeriodError",
    "ProviderRecommendationEngine",
    "RecommendationEngine",
    "RuleBasedRecommendationEngine",
    "SelfAssessmentNotFoundError",
    "SelfAssessmentService",
    "UserService",
    "WellnessEventFilters",
    "WellnessEventService",
    "build_recommendation_engine",
]
