"""Feedback domain

Reader evaluations of issued recommendations, their aggregation into
analytics and the insights derived from week-over-week style trends.

Structure:
    - models.py: SQLAlchemy models (RecommendationFeedback, RecommendationInsightRecord)
    - schemas.py: Pydantic schemas (FeedbackCreate, RecommendationAnalytics, ...)
    - analytics.py: feedback aggregation
    - insights.py: insight generation from two analytics windows
    - repository.py: data access
    - service.py: validation, retention and insight history
    - router.py: API endpoints
    - exceptions.py: domain exceptions
"""

from app.domains.feedback.analytics import compute_analytics
from app.domains.feedback.exceptions import (
    FeedbackArticleMismatchException,
    FeedbackErrorCode,
    FeedbackUserMismatchException,
)
from app.domains.feedback.insights import filter_insights, generate_insights
from app.domains.feedback.models import (
    RecommendationFeedback,
    RecommendationInsightRecord,
)
from app.domains.feedback.router import router
from app.domains.feedback.schemas import (
    FeedbackCreate,
    FeedbackRecord,
    ImpactLevel,
    InsightType,
    RecommendationAnalytics,
    RecommendationInsight,
    Timeframe,
)
from app.domains.feedback.service import FeedbackService

__all__ = [
    "RecommendationFeedback",
    "RecommendationInsightRecord",
    "FeedbackCreate",
    "FeedbackRecord",
    "RecommendationAnalytics",
    "RecommendationInsight",
    "InsightType",
    "ImpactLevel",
    "Timeframe",
    "compute_analytics",
    "generate_insights",
    "filter_insights",
    "FeedbackService",
    "router",
    "FeedbackErrorCode",
    "FeedbackArticleMismatchException",
    "FeedbackUserMismatchException",
]
