"""Articles domain schemas

``ContentItem`` is the read model handed to the scoring engine.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domains.articles.models import (
    Article,
    ArticleLanguage,
    ArticlePriority,
    ArticleStatus,
)


class ArticleCategory(BaseModel):
    id: Optional[str] = None
    name: str


class ArticleAnalytics(BaseModel):
    """Engagement snapshot"""

    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    average_read_time: float = Field(default=0.0, ge=0, description="Seconds")
    click_through_rate: Optional[float] = Field(
        default=None, description="Fraction of impressions clicked"
    )


class ContentItem(BaseModel):
    """Article as seen by the recommendation engine"""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    excerpt: str = ""
    content: str = ""
    category: Optional[ArticleCategory] = None
    tags: list[str] = Field(default_factory=list)
    status: ArticleStatus = ArticleStatus.DRAFT
    created_at: datetime
    published_at: Optional[datetime] = None
    analytics: Optional[ArticleAnalytics] = None
    priority: ArticlePriority = ArticlePriority.NORMAL
    language: ArticleLanguage = ArticleLanguage.AR
    featured_image: Optional[str] = None

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None


def to_content_item(article: Article) -> ContentItem:
    """Convert an ORM ``Article`` to a ``ContentItem``

    Args:
        article: ORM row

    Returns:
        ContentItem: immutable read model; ``analytics`` is None when the
        article has no reported views
    """
    category = None
    if article.category_name:
        category = ArticleCategory(
            id=article.category_id, name=article.category_name
        )

    analytics = None
    if article.views is not None:
        analytics = ArticleAnalytics(
            views=article.views or 0,
            likes=article.likes or 0,
            shares=article.shares or 0,
            comments=article.comments or 0,
            average_read_time=article.average_read_time or 0.0,
            click_through_rate=article.click_through_rate,
        )

    return ContentItem(
        id=article.id,
        title=article.title,
        excerpt=article.excerpt or "",
        content=article.content or "",
        category=category,
        tags=list(article.tags or []),
        status=ArticleStatus(article.status),
        created_at=article.created_at,
        published_at=article.published_at,
        analytics=analytics,
        priority=ArticlePriority(article.priority),
        language=ArticleLanguage(article.language),
        featured_image=article.featured_image,
    )
