"""Articles domain repository (read-only)"""

from typing import Optional, Sequence, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.articles.models import Article, ArticleStatus


class ArticleRepository:
    """Read access to the article store"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, article_id: str) -> Optional[Article]:
        result = await self.session.execute(
            select(Article).where(Article.id == article_id)
        )
        return cast(Optional[Article], result.scalar_one_or_none())

    async def get_published(self, limit: int = 500) -> Sequence[Article]:
        """Most recent published articles

        Args:
            limit: maximum number of rows

        Returns:
            published articles, newest first
        """
        query = (
            select(Article)
            .where(Article.status == ArticleStatus.PUBLISHED.value)
            .order_by(Article.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return cast(Sequence[Article], result.scalars().all())
