"""Recommendations domain schemas"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RecommendationCategory(str, Enum):
    """Why an article was recommended (first matching rule wins)"""

    TRENDING = "trending"
    PERSONALIZED = "personalized"
    SIMILAR = "similar"
    EDITORIAL = "editorial"


class EngineWeights(BaseModel):
    """Tunable engine weights

    The four sub-score weights are percentages and are not required to sum
    to 100. ``recency_boost`` is applied as a direct fraction.
    ``diversity_factor`` is stored for the settings screen; the re-ranker
    always applies its category quota.
    """

    model_config = ConfigDict(from_attributes=True)

    personalized_weight: float = Field(default=40, ge=0, le=100)
    trending_weight: float = Field(default=30, ge=0, le=100)
    similarity_weight: float = Field(default=20, ge=0, le=100)
    editorial_weight: float = Field(default=10, ge=0, le=100)
    diversity_factor: float = Field(default=0.3, ge=0, le=1)
    recency_boost: float = Field(default=0.2, ge=0, le=1)


class SubScores(BaseModel):
    """The five normalized components of a recommendation score"""

    personalized: float = 0.0
    trending: float = 0.0
    similarity: float = 0.0
    editorial: float = 0.0
    recency: float = 0.0


class RecommendationScore(BaseModel):
    """Scored candidate

    ``recommendation_id`` is assigned once the recommendation is issued to a
    user; freshly scored candidates carry None.
    """

    model_config = ConfigDict(frozen=True)

    article_id: str
    score: float = Field(..., ge=0, le=1)
    reasons: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0, le=1)
    category: RecommendationCategory
    content_category: Optional[str] = Field(
        default=None, description="Article category name"
    )
    sub_scores: SubScores = Field(default_factory=SubScores)
    recommendation_id: Optional[str] = None


class RecommendationList(BaseModel):
    """Ranked recommendations for one request"""

    user_id: str
    current_article_id: Optional[str] = None
    total_candidates: int = Field(..., description="Candidates scored")
    recommendations: list[RecommendationScore] = Field(default_factory=list)
    weights: EngineWeights
    generated_at: datetime
