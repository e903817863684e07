"""Feedback domain models"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    ARRAY,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class RecommendationFeedback(Base):
    """A reader's evaluation of one issued recommendation

    Written once, never updated. Rows older than the retention window are
    pruned when new feedback arrives.
    """

    __tablename__ = "recommendation_feedbacks"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, comment="feedback_<hex>"
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    article_id: Mapped[str] = mapped_column(String(64), nullable=False)
    recommendation_id: Mapped[str] = mapped_column(String(64), nullable=False)

    rating: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-5")
    helpful: Mapped[Optional[bool]] = mapped_column(
        Boolean, nullable=True, comment="NULL when the reader did not vote"
    )
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reasons: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )

    # Context snapshot at submission time
    category: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Article category name"
    )
    recommendation_score: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True
    )
    time_of_day: Mapped[str] = mapped_column(String(10), nullable=False)
    session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_recommendation_feedbacks_created_at", "created_at"),
        Index("ix_recommendation_feedbacks_user_id", "user_id"),
        Index(
            "ix_recommendation_feedbacks_recommendation_id", "recommendation_id"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<RecommendationFeedback(id={self.id}, user_id={self.user_id}, "
            f"rating={self.rating}, helpful={self.helpful})>"
        )


class RecommendationInsightRecord(Base):
    """Stored insight (history for the insights screen)"""

    __tablename__ = "recommendation_insights"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, comment="insight_<hex>"
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    impact: Mapped[str] = mapped_column(String(10), nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False)
    action_items: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    metric_before: Mapped[float] = mapped_column(Float, nullable=False)
    metric_after: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    metric_target: Mapped[float] = mapped_column(Float, nullable=False)
    timeframe: Mapped[str] = mapped_column(String(10), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        Index("ix_recommendation_insights_generated_at", "generated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<RecommendationInsightRecord(id={self.id}, type={self.type}, "
            f"impact={self.impact})>"
        )
