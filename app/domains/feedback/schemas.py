"""Feedback domain schemas"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Timeframe(str, Enum):
    """Analytics window"""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"

    @property
    def days(self) -> int:
        return _TIMEFRAME_DAYS[self]


_TIMEFRAME_DAYS = {
    Timeframe.DAY: 1,
    Timeframe.WEEK: 7,
    Timeframe.MONTH: 30,
    Timeframe.QUARTER: 90,
}


class FeedbackCreate(BaseModel):
    """Feedback submission"""

    user_id: str = Field(..., min_length=1, max_length=64)
    article_id: str = Field(..., min_length=1, max_length=64)
    recommendation_id: str = Field(..., min_length=1, max_length=64)
    rating: int = Field(..., ge=1, le=5, description="Star rating 1-5")
    helpful: Optional[bool] = Field(
        default=None, description="Helpful vote; omit when not voted"
    )
    comment: Optional[str] = Field(default=None, max_length=2000)
    reasons: list[str] = Field(default_factory=list, max_length=20)
    session_id: Optional[str] = Field(default=None, max_length=64)


class FeedbackRecord(BaseModel):
    """Stored feedback"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    article_id: str
    recommendation_id: str
    rating: int
    helpful: Optional[bool] = None
    comment: Optional[str] = None
    reasons: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    recommendation_score: Optional[float] = None
    time_of_day: Optional[str] = None
    session_id: Optional[str] = None
    created_at: datetime


class CategoryPerformance(BaseModel):
    avg_rating: float = 0.0
    count: int = 0
    helpfulness_rate: float = 0.0
    votes: int = Field(default=0, description="Non-null helpful votes")


class TimeSlotPerformance(BaseModel):
    avg_rating: float = 0.0
    count: int = 0


class CommonFeedback(BaseModel):
    """Representative comments (at most five each)"""

    positive: list[str] = Field(default_factory=list)
    negative: list[str] = Field(default_factory=list)


class RecommendationAnalytics(BaseModel):
    """Aggregated feedback for one window

    Empty windows produce zeros and empty maps.
    """

    timeframe: Timeframe
    window_start: datetime
    window_end: datetime
    total_evaluations: int = 0
    average_rating: float = 0.0
    helpfulness_rate: float = 0.0
    total_votes: int = Field(default=0, description="Non-null helpful votes")
    category_performance: dict[str, CategoryPerformance] = Field(
        default_factory=dict
    )
    time_slot_performance: dict[str, TimeSlotPerformance] = Field(
        default_factory=dict
    )
    common_feedback: CommonFeedback = Field(default_factory=CommonFeedback)
    improvement_suggestions: list[str] = Field(default_factory=list)


class InsightType(str, Enum):
    PERFORMANCE = "performance"
    USER_BEHAVIOR = "user-behavior"
    CONTENT_GAP = "content-gap"
    OPTIMIZATION = "optimization"


class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightMetrics(BaseModel):
    before: float
    after: Optional[float] = None
    target: float


class RecommendationInsight(BaseModel):
    """Advisory statement derived from feedback trends"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: InsightType
    title: str
    description: str
    impact: ImpactLevel
    confidence: int = Field(..., ge=0, le=100)
    action_items: list[str] = Field(default_factory=list)
    metrics: InsightMetrics
    timeframe: Timeframe
    category: Optional[str] = None
    generated_at: datetime
