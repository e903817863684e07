"""Feedback domain service"""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.datetime import days_ago, now_utc, time_of_day_bucket
from app.domains.feedback.analytics import compute_analytics
from app.domains.feedback.exceptions import (
    FeedbackArticleMismatchException,
    FeedbackUserMismatchException,
)
from app.domains.feedback.insights import filter_insights, generate_insights
from app.domains.feedback.models import (
    RecommendationFeedback,
    RecommendationInsightRecord,
)
from app.domains.feedback.repository import FeedbackRepository
from app.domains.feedback.schemas import (
    FeedbackCreate,
    FeedbackRecord,
    InsightMetrics,
    InsightType,
    RecommendationAnalytics,
    RecommendationInsight,
    Timeframe,
)
from app.domains.recommendations.exceptions import RecommendationNotFoundException
from app.domains.recommendations.repository import RecommendationRepository

logger = get_logger(__name__)


def _to_record(insight: RecommendationInsight) -> RecommendationInsightRecord:
    return RecommendationInsightRecord(
        id=insight.id,
        type=insight.type.value,
        title=insight.title,
        description=insight.description,
        impact=insight.impact.value,
        confidence=insight.confidence,
        action_items=list(insight.action_items),
        metric_before=insight.metrics.before,
        metric_after=insight.metrics.after,
        metric_target=insight.metrics.target,
        timeframe=insight.timeframe.value,
        category=insight.category,
        generated_at=insight.generated_at,
    )


def _from_record(record: RecommendationInsightRecord) -> RecommendationInsight:
    return RecommendationInsight(
        id=record.id,
        type=InsightType(record.type),
        title=record.title,
        description=record.description,
        impact=record.impact,
        confidence=record.confidence,
        action_items=list(record.action_items or []),
        metrics=InsightMetrics(
            before=record.metric_before,
            after=record.metric_after,
            target=record.metric_target,
        ),
        timeframe=Timeframe(record.timeframe),
        category=record.category,
        generated_at=record.generated_at,
    )


class FeedbackService:
    """Feedback intake, analytics and insights"""

    def __init__(self, session: AsyncSession):
        self.repository = FeedbackRepository(session)
        self.recommendation_repository = RecommendationRepository(session)

    async def record_feedback(
        self, data: FeedbackCreate, now: Optional[datetime] = None
    ) -> RecommendationFeedback:
        """Validate and store a reader's evaluation

        The recommendation must have been issued to the same user for the
        same article. The stored row snapshots the recommendation score, the
        article category and the time-of-day bucket.

        Args:
            data: feedback submission
            now: submission time (default: current UTC)

        Returns:
            stored feedback

        Raises:
            RecommendationNotFoundException: unknown recommendation
            FeedbackUserMismatchException: issued to another user
            FeedbackArticleMismatchException: issued for another article
        """
        now = now or now_utc()

        issued = await self.recommendation_repository.get_issued(
            data.recommendation_id
        )
        if issued is None:
            raise RecommendationNotFoundException(data.recommendation_id)
        if issued.user_id != data.user_id:
            raise FeedbackUserMismatchException(data.recommendation_id, data.user_id)
        if issued.article_id != data.article_id:
            raise FeedbackArticleMismatchException(
                data.recommendation_id, data.article_id
            )

        feedback = RecommendationFeedback(
            id=f"feedback_{uuid.uuid4().hex}",
            user_id=data.user_id,
            article_id=data.article_id,
            recommendation_id=data.recommendation_id,
            rating=data.rating,
            helpful=data.helpful,
            comment=data.comment,
            reasons=list(data.reasons),
            category=issued.content_category,
            recommendation_score=issued.score,
            time_of_day=time_of_day_bucket(now),
            session_id=data.session_id or f"session_{int(now.timestamp() * 1000)}",
            created_at=now,
        )
        created = await self.repository.create(feedback)

        pruned = await self.repository.delete_older_than(
            days_ago(settings.feedback_retention_days, now)
        )

        logger.info(
            "Feedback recorded",
            extra={
                "request_id": get_request_id(),
                "feedback_id": created.id,
                "user_id": created.user_id,
                "rating": created.rating,
                "pruned": pruned,
            },
        )
        return created

    async def list_feedback(
        self,
        page: int = 1,
        size: int = 20,
        user_id: Optional[str] = None,
    ) -> tuple[list[RecommendationFeedback], int]:
        """(feedback page, total count)"""
        skip = (page - 1) * size
        items = await self.repository.get_list(skip=skip, limit=size, user_id=user_id)
        total = await self.repository.count(user_id=user_id)
        return list(items), total

    async def get_analytics(
        self, timeframe: Timeframe, now: Optional[datetime] = None
    ) -> RecommendationAnalytics:
        now = now or now_utc()
        rows = await self.repository.get_since(days_ago(timeframe.days, now))
        return compute_analytics(
            [FeedbackRecord.model_validate(r) for r in rows], timeframe, now=now
        )

    async def generate_insights(
        self, timeframe: Timeframe, now: Optional[datetime] = None
    ) -> list[RecommendationInsight]:
        """Generate insights for ``timeframe`` and store them in the history

        Compares the latest window with the one before it. After storing, only
        the newest ``insight_history_limit`` older insights are retained.

        Args:
            timeframe: window length
            now: end of the current window

        Returns:
            the newly generated insights
        """
        now = now or now_utc()
        window = timedelta(days=timeframe.days)

        rows = await self.repository.get_since(now - 2 * window)
        records = [FeedbackRecord.model_validate(r) for r in rows]

        current = compute_analytics(records, timeframe, now=now)
        previous = compute_analytics(
            records, timeframe, now=now - window, include_end=False
        )
        insights = generate_insights(current, previous, now=now)

        if insights:
            await self.repository.create_insights([_to_record(i) for i in insights])
        pruned = await self.repository.prune_insights(
            keep_ids=[i.id for i in insights],
            keep_older=settings.insight_history_limit,
        )

        logger.info(
            "Insights generated",
            extra={
                "request_id": get_request_id(),
                "timeframe": timeframe.value,
                "generated": len(insights),
                "pruned": pruned,
            },
        )
        return insights

    async def list_insights(
        self,
        insight_type: Optional[InsightType] = None,
        category: Optional[str] = None,
    ) -> list[RecommendationInsight]:
        """Insight history, newest first, optionally filtered"""
        records = await self.repository.list_insights()
        return filter_insights(
            [_from_record(r) for r in records],
            insight_type=insight_type,
            category=category,
        )
