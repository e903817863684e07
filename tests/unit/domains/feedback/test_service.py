"""FeedbackService unit tests"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.utils.datetime import UTC
from app.domains.feedback.exceptions import (
    FeedbackArticleMismatchException,
    FeedbackUserMismatchException,
)
from app.domains.feedback.models import (
    RecommendationFeedback,
    RecommendationInsightRecord,
)
from app.domains.feedback.schemas import (
    FeedbackCreate,
    InsightType,
    Timeframe,
)
from app.domains.feedback.service import FeedbackService
from app.domains.recommendations.exceptions import RecommendationNotFoundException
from app.domains.recommendations.models import IssuedRecommendation


@pytest.fixture
def mock_session():
    """Mock AsyncSession"""
    return MagicMock()


@pytest.fixture
def feedback_service(mock_session):
    service = FeedbackService(mock_session)
    service.repository.create = AsyncMock(side_effect=lambda row: row)
    service.repository.delete_older_than = AsyncMock(return_value=0)
    return service


@pytest.fixture
def issued():
    return IssuedRecommendation(
        id="rec_abc",
        user_id="reader-1",
        article_id="a-1",
        score=0.72,
        confidence=0.82,
        category="personalized",
        content_category="World",
        reasons=["Matches your interests"],
    )


def submission(**overrides) -> FeedbackCreate:
    values = {
        "user_id": "reader-1",
        "article_id": "a-1",
        "recommendation_id": "rec_abc",
        "rating": 4,
        "helpful": True,
        "comment": "Good pick",
    }
    values.update(overrides)
    return FeedbackCreate(**values)


def feedback_row(rating: int, created_at: datetime, category: str = "World"):
    return RecommendationFeedback(
        id=f"feedback_{rating}_{created_at.timestamp()}",
        user_id="reader-1",
        article_id="a-1",
        recommendation_id="rec_abc",
        rating=rating,
        helpful=None,
        comment=None,
        reasons=[],
        category=category,
        recommendation_score=0.5,
        time_of_day="morning",
        session_id=None,
        created_at=created_at,
    )


class TestRecordFeedback:
    """record_feedback"""

    @pytest.mark.asyncio
    async def test_success_snapshots_recommendation(self, feedback_service, issued):
        # Given
        feedback_service.recommendation_repository.get_issued = AsyncMock(
            return_value=issued
        )
        now = datetime(2026, 3, 2, 21, 15, tzinfo=UTC)

        # When
        with patch("app.domains.feedback.service.logger") as mock_logger:
            result = await feedback_service.record_feedback(submission(), now=now)

            # Then
            mock_logger.info.assert_called_once()

        assert result.id.startswith("feedback_")
        assert result.category == "World"
        assert result.recommendation_score == 0.72
        assert result.time_of_day == "night"
        assert result.session_id == f"session_{int(now.timestamp() * 1000)}"
        assert result.created_at == now

    @pytest.mark.asyncio
    async def test_prunes_past_retention(self, feedback_service, issued):
        feedback_service.recommendation_repository.get_issued = AsyncMock(
            return_value=issued
        )
        now = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)

        await feedback_service.record_feedback(submission(session_id="s-1"), now=now)

        feedback_service.repository.delete_older_than.assert_called_once_with(
            now - timedelta(days=365)
        )

    @pytest.mark.asyncio
    async def test_unknown_recommendation(self, feedback_service):
        feedback_service.recommendation_repository.get_issued = AsyncMock(
            return_value=None
        )

        with pytest.raises(RecommendationNotFoundException):
            await feedback_service.record_feedback(submission())

        feedback_service.repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_users_recommendation(self, feedback_service, issued):
        feedback_service.recommendation_repository.get_issued = AsyncMock(
            return_value=issued
        )

        with pytest.raises(FeedbackUserMismatchException):
            await feedback_service.record_feedback(submission(user_id="reader-2"))

    @pytest.mark.asyncio
    async def test_article_mismatch(self, feedback_service, issued):
        feedback_service.recommendation_repository.get_issued = AsyncMock(
            return_value=issued
        )

        with pytest.raises(FeedbackArticleMismatchException):
            await feedback_service.record_feedback(submission(article_id="a-2"))


class TestListFeedback:
    @pytest.mark.asyncio
    async def test_paging(self, feedback_service):
        feedback_service.repository.get_list = AsyncMock(return_value=[])
        feedback_service.repository.count = AsyncMock(return_value=45)

        items, total = await feedback_service.list_feedback(
            page=3, size=20, user_id="reader-1"
        )

        assert items == []
        assert total == 45
        feedback_service.repository.get_list.assert_called_once_with(
            skip=40, limit=20, user_id="reader-1"
        )


class TestAnalytics:
    @pytest.mark.asyncio
    async def test_week_analytics(self, feedback_service, fixed_now):
        feedback_service.repository.get_since = AsyncMock(
            return_value=[
                feedback_row(5, fixed_now - timedelta(days=1)),
                feedback_row(5, fixed_now - timedelta(days=2)),
                feedback_row(1, fixed_now - timedelta(days=3)),
            ]
        )

        analytics = await feedback_service.get_analytics(Timeframe.WEEK, now=fixed_now)

        assert analytics.total_evaluations == 3
        assert analytics.average_rating == pytest.approx(11 / 3)
        feedback_service.repository.get_since.assert_called_once_with(
            fixed_now - timedelta(days=7)
        )


class TestInsights:
    @pytest.mark.asyncio
    async def test_generate_persists_and_prunes(self, feedback_service, fixed_now):
        # Given: World ratings dropped from 4-5 to 1-2 week over week
        previous = [
            feedback_row(r, fixed_now - timedelta(days=8, hours=i))
            for i, r in enumerate([5, 4, 4, 5])
        ]
        current = [
            feedback_row(r, fixed_now - timedelta(days=1, hours=i))
            for i, r in enumerate([1, 2, 2])
        ]
        feedback_service.repository.get_since = AsyncMock(return_value=previous + current)
        feedback_service.repository.create_insights = AsyncMock()
        feedback_service.repository.prune_insights = AsyncMock(return_value=2)

        # When
        insights = await feedback_service.generate_insights(Timeframe.WEEK, now=fixed_now)

        # Then
        assert insights
        assert insights[0].type == InsightType.PERFORMANCE
        assert insights[0].category == "World"
        feedback_service.repository.get_since.assert_called_once_with(
            fixed_now - timedelta(days=14)
        )
        records = feedback_service.repository.create_insights.call_args.args[0]
        assert [r.id for r in records] == [i.id for i in insights]
        assert records[0].type == "performance"
        feedback_service.repository.prune_insights.assert_called_once_with(
            keep_ids=[i.id for i in insights], keep_older=10
        )

    @pytest.mark.asyncio
    async def test_boundary_feedback_counted_once(self, feedback_service, fixed_now):
        """Feedback stamped exactly one window ago belongs to the latest window"""
        boundary = fixed_now - timedelta(days=7)
        feedback_service.repository.get_since = AsyncMock(
            return_value=[feedback_row(3, boundary)]
        )
        feedback_service.repository.create_insights = AsyncMock()
        feedback_service.repository.prune_insights = AsyncMock(return_value=0)

        with patch("app.domains.feedback.service.generate_insights", return_value=[]) as mock_generate:
            await feedback_service.generate_insights(Timeframe.WEEK, now=fixed_now)

        current, previous = mock_generate.call_args.args
        assert current.total_evaluations == 1
        assert previous.total_evaluations == 0

    @pytest.mark.asyncio
    async def test_generate_without_feedback(self, feedback_service, fixed_now):
        feedback_service.repository.get_since = AsyncMock(return_value=[])
        feedback_service.repository.create_insights = AsyncMock()
        feedback_service.repository.prune_insights = AsyncMock(return_value=0)

        insights = await feedback_service.generate_insights(Timeframe.DAY, now=fixed_now)

        assert insights == []
        feedback_service.repository.create_insights.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_insights_filters(self, feedback_service, fixed_now):
        feedback_service.repository.list_insights = AsyncMock(
            return_value=[
                RecommendationInsightRecord(
                    id="insight_a",
                    type="content-gap",
                    title="Weak coverage in Economy",
                    description="...",
                    impact="medium",
                    confidence=60,
                    action_items=["Commission more Economy articles"],
                    metric_before=25.0,
                    metric_after=None,
                    metric_target=70.0,
                    timeframe="week",
                    category="Economy",
                    generated_at=fixed_now,
                ),
                RecommendationInsightRecord(
                    id="insight_b",
                    type="performance",
                    title="Rating drop in World",
                    description="...",
                    impact="high",
                    confidence=65,
                    action_items=[],
                    metric_before=4.0,
                    metric_after=2.0,
                    metric_target=4.0,
                    timeframe="week",
                    category="World",
                    generated_at=fixed_now,
                ),
            ]
        )

        result = await feedback_service.list_insights(
            insight_type=InsightType.CONTENT_GAP
        )

        assert [i.id for i in result] == ["insight_a"]
        assert result[0].metrics.target == 70.0
        assert result[0].timeframe == Timeframe.WEEK
