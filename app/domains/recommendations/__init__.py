"""Recommendations domain

Multi-factor scoring and diversity re-ranking of news articles.

Structure:
    - models.py: SQLAlchemy models (EngineSettings, IssuedRecommendation)
    - schemas.py: Pydantic schemas (EngineWeights, RecommendationScore, ...)
    - scoring.py: ScoringEngine (five weighted sub-scores)
    - similarity.py: SimilarityClassifier interface and LLM implementation
    - prompts.py: similarity prompts
    - reranker.py: category-quota diversity re-ranking
    - tracking.py: last-request-wins per viewing context
    - repository.py: data access
    - service.py: generation pipeline and engine settings
    - router.py: API endpoints
    - exceptions.py: domain exceptions
"""

from app.domains.recommendations.exceptions import (
    RecommendationErrorCode,
    RecommendationNotFoundException,
    SimilarityParseError,
    StaleRecommendationRequestException,
)
from app.domains.recommendations.models import EngineSettings, IssuedRecommendation
from app.domains.recommendations.reranker import rerank
from app.domains.recommendations.router import router
from app.domains.recommendations.schemas import (
    EngineWeights,
    RecommendationCategory,
    RecommendationList,
    RecommendationScore,
    SubScores,
)
from app.domains.recommendations.scoring import ScoringEngine
from app.domains.recommendations.service import RecommendationService
from app.domains.recommendations.similarity import (
    LLMSimilarityClassifier,
    SimilarityClassifier,
    parse_similarity_score,
)

__all__ = [
    "EngineSettings",
    "IssuedRecommendation",
    "EngineWeights",
    "RecommendationCategory",
    "RecommendationList",
    "RecommendationScore",
    "SubScores",
    "ScoringEngine",
    "SimilarityClassifier",
    "LLMSimilarityClassifier",
    "parse_similarity_score",
    "rerank",
    "RecommendationService",
    "router",
    "RecommendationErrorCode",
    "RecommendationNotFoundException",
    "StaleRecommendationRequestException",
    "SimilarityParseError",
]
