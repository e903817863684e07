"""Feedback domain repository"""

from datetime import datetime
from typing import Optional, Sequence, cast

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.feedback.models import (
    RecommendationFeedback,
    RecommendationInsightRecord,
)


class FeedbackRepository:
    """Feedback log and insight history"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, feedback: RecommendationFeedback) -> RecommendationFeedback:
        self.session.add(feedback)
        await self.session.flush()
        await self.session.refresh(feedback)
        return feedback

    async def get_list(
        self,
        skip: int = 0,
        limit: int = 20,
        user_id: Optional[str] = None,
    ) -> Sequence[RecommendationFeedback]:
        """Feedback page, newest first

        Args:
            skip: rows to skip
            limit: maximum rows
            user_id: only this user's feedback
        """
        query = select(RecommendationFeedback)
        if user_id is not None:
            query = query.where(RecommendationFeedback.user_id == user_id)
        query = (
            query.order_by(RecommendationFeedback.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return cast(Sequence[RecommendationFeedback], result.scalars().all())

    async def count(self, user_id: Optional[str] = None) -> int:
        query = select(func.count(RecommendationFeedback.id))
        if user_id is not None:
            query = query.where(RecommendationFeedback.user_id == user_id)
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def get_since(self, start: datetime) -> Sequence[RecommendationFeedback]:
        """All feedback created at or after ``start``"""
        query = (
            select(RecommendationFeedback)
            .where(RecommendationFeedback.created_at >= start)
            .order_by(RecommendationFeedback.created_at.asc())
        )
        result = await self.session.execute(query)
        return cast(Sequence[RecommendationFeedback], result.scalars().all())

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Remove feedback created before ``cutoff``

        Returns:
            number of deleted rows
        """
        result = await self.session.execute(
            delete(RecommendationFeedback).where(
                RecommendationFeedback.created_at < cutoff
            )
        )
        return int(result.rowcount or 0)

    async def create_insights(
        self, records: Sequence[RecommendationInsightRecord]
    ) -> None:
        self.session.add_all(list(records))
        await self.session.flush()

    async def list_insights(self) -> Sequence[RecommendationInsightRecord]:
        query = select(RecommendationInsightRecord).order_by(
            RecommendationInsightRecord.generated_at.desc()
        )
        result = await self.session.execute(query)
        return cast(Sequence[RecommendationInsightRecord], result.scalars().all())

    async def prune_insights(self, keep_ids: Sequence[str], keep_older: int) -> int:
        """Delete history beyond the newest ``keep_older`` rows

        Rows in ``keep_ids`` (the batch just generated) are always kept and
        do not count toward ``keep_older``.

        Returns:
            number of deleted rows
        """
        older = (
            select(RecommendationInsightRecord.id)
            .where(RecommendationInsightRecord.id.not_in(list(keep_ids)))
            .order_by(RecommendationInsightRecord.generated_at.desc())
            .offset(keep_older)
        )
        result = await self.session.execute(older)
        stale_ids = list(result.scalars().all())
        if not stale_ids:
            return 0

        await self.session.execute(
            delete(RecommendationInsightRecord).where(
                RecommendationInsightRecord.id.in_(stale_ids)
            )
        )
        return len(stale_ids)
