"""Articles domain models

Articles are written by the editorial workflow; this service only reads them.
Engagement counters are maintained by the analytics pipeline.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    ARRAY,
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


class ArticleStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"


class ArticlePriority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class ArticleLanguage(str, Enum):
    AR = "ar"
    EN = "en"


class Article(Base):
    """News article

    The analytics snapshot is stored flat; ``views`` is NULL when the
    analytics pipeline has not reported the article yet.
    """

    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Article ID (editorial system)",
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(
        Text, nullable=False, server_default="", comment="Body text"
    )

    category_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True
    )
    category_name: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Category display name"
    )
    tags: Mapped[Optional[list[str]]] = mapped_column(
        ARRAY(String),
        nullable=True,
        comment="Tag names (PostgreSQL ARRAY)",
    )

    status: Mapped[ArticleStatus] = mapped_column(
        String(20),
        nullable=False,
        default=ArticleStatus.DRAFT,
        server_default="draft",
    )
    priority: Mapped[ArticlePriority] = mapped_column(
        String(20),
        nullable=False,
        default=ArticlePriority.NORMAL,
        server_default="normal",
    )
    language: Mapped[ArticleLanguage] = mapped_column(
        String(5),
        nullable=False,
        default=ArticleLanguage.AR,
        server_default="ar",
    )
    featured_image: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Featured image URL"
    )

    # Analytics snapshot
    views: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    likes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    shares: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    comments: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    average_read_time: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Average read time (seconds)"
    )
    click_through_rate: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="CTR as a fraction"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_articles_status_created_at", "status", "created_at"),
        Index("ix_articles_category_name", "category_name"),
    )

    def __repr__(self) -> str:
        return (
            f"<Article(id={self.id}, status={self.status}, "
            f"category={self.category_name})>"
        )
