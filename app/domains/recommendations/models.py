"""Recommendations domain models"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ARRAY, DateTime, Float, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

DEFAULT_SETTINGS_SCOPE = "recommendation-settings"


class EngineSettings(Base):
    """Persisted engine weights, one row per scope"""

    __tablename__ = "engine_settings"

    scope: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=DEFAULT_SETTINGS_SCOPE,
    )
    personalized_weight: Mapped[float] = mapped_column(Float, nullable=False)
    trending_weight: Mapped[float] = mapped_column(Float, nullable=False)
    similarity_weight: Mapped[float] = mapped_column(Float, nullable=False)
    editorial_weight: Mapped[float] = mapped_column(Float, nullable=False)
    diversity_factor: Mapped[float] = mapped_column(Float, nullable=False)
    recency_boost: Mapped[float] = mapped_column(Float, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<EngineSettings(scope={self.scope}, "
            f"p={self.personalized_weight}, t={self.trending_weight}, "
            f"s={self.similarity_weight}, e={self.editorial_weight})>"
        )


class IssuedRecommendation(Base):
    """A recommendation shown to a user

    Feedback must reference one of these rows.
    """

    __tablename__ = "issued_recommendations"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, comment="rec_<hex>"
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    article_id: Mapped[str] = mapped_column(String(64), nullable=False)
    current_article_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, comment="Article being read when issued"
    )
    score: Mapped[float] = mapped_column(Float, nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="trending/personalized/similar/editorial"
    )
    content_category: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Article category name"
    )
    reasons: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_issued_recommendations_user_id", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<IssuedRecommendation(id={self.id}, user_id={self.user_id}, "
            f"article_id={self.article_id}, score={self.score})>"
        )
