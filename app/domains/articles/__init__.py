"""Articles domain

Read-only view of the editorial article store.

Structure:
    - models.py: SQLAlchemy model (Article) and its enums
    - schemas.py: ContentItem read model and ORM conversion
    - repository.py: read-only data access
    - exceptions.py: domain exceptions
"""

from app.domains.articles.exceptions import (
    ArticleErrorCode,
    ArticleNotFoundException,
)
from app.domains.articles.models import (
    Article,
    ArticleLanguage,
    ArticlePriority,
    ArticleStatus,
)
from app.domains.articles.repository import ArticleRepository
from app.domains.articles.schemas import (
    ArticleAnalytics,
    ArticleCategory,
    ContentItem,
    to_content_item,
)

__all__ = [
    "Article",
    "ArticleStatus",
    "ArticlePriority",
    "ArticleLanguage",
    "ArticleRepository",
    "ArticleAnalytics",
    "ArticleCategory",
    "ContentItem",
    "to_content_item",
    "ArticleErrorCode",
    "ArticleNotFoundException",
]
