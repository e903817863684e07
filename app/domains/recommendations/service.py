"""Recommendations domain service

Loads candidates, preferences, behavior and weights, runs the scoring
engine and the diversity re-ranker, and logs what was issued.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.datetime import now_utc
from app.core.utils.time import measure_time
from app.domains.articles.exceptions import ArticleNotFoundException
from app.domains.articles.repository import ArticleRepository
from app.domains.articles.schemas import ContentItem, to_content_item
from app.domains.preferences.service import PreferenceService
from app.domains.recommendations.exceptions import (
    RecommendationNotFoundException,
    StaleRecommendationRequestException,
)
from app.domains.recommendations.models import (
    DEFAULT_SETTINGS_SCOPE,
    EngineSettings,
    IssuedRecommendation,
)
from app.domains.recommendations.repository import RecommendationRepository
from app.domains.recommendations.reranker import rerank
from app.domains.recommendations.schemas import (
    EngineWeights,
    RecommendationCategory,
    RecommendationList,
    RecommendationScore,
)
from app.domains.recommendations.scoring import ScoringEngine
from app.domains.recommendations.similarity import (
    LLMSimilarityClassifier,
    SimilarityClassifier,
)
from app.domains.recommendations.tracking import RequestTracker, request_tracker

logger = get_logger(__name__)


def generate_recommendation_id() -> str:
    return f"rec_{uuid.uuid4().hex}"


class RecommendationService:
    """Recommendation generation and engine settings"""

    def __init__(
        self,
        session: AsyncSession,
        classifier: Optional[SimilarityClassifier] = None,
        tracker: Optional[RequestTracker] = None,
    ):
        self.repository = RecommendationRepository(session)
        self.article_repository = ArticleRepository(session)
        self.preference_service = PreferenceService(session)
        self.engine = ScoringEngine(classifier or LLMSimilarityClassifier())
        self.tracker = tracker or request_tracker

    async def get_weights(self, scope: str = DEFAULT_SETTINGS_SCOPE) -> EngineWeights:
        """Stored weights for ``scope``, or the defaults when none are stored"""
        stored = await self.repository.get_settings(scope)
        if stored is None:
            return EngineWeights()
        return EngineWeights.model_validate(stored)

    async def update_weights(
        self, weights: EngineWeights, scope: str = DEFAULT_SETTINGS_SCOPE
    ) -> EngineWeights:
        """Replace the stored weights for ``scope``

        Args:
            weights: validated weights
            scope: settings scope

        Returns:
            the stored weights
        """
        stored = await self.repository.get_settings(scope)
        values = weights.model_dump()

        if stored is None:
            stored = await self.repository.create_settings(
                EngineSettings(scope=scope, **values)
            )
        else:
            for field, value in values.items():
                setattr(stored, field, value)
            stored = await self.repository.update_settings(stored)

        logger.info(
            "Engine weights updated",
            extra={"request_id": get_request_id(), "scope": scope, **values},
        )
        return EngineWeights.model_validate(stored)

    async def _load_current_item(
        self, current_article_id: str, candidates: list[ContentItem]
    ) -> ContentItem:
        for item in candidates:
            if item.id == current_article_id:
                return item

        article = await self.article_repository.get_by_id(current_article_id)
        if article is None:
            raise ArticleNotFoundException(article_id=current_article_id)
        return to_content_item(article)

    async def generate_recommendations(
        self,
        user_id: str,
        current_article_id: Optional[str] = None,
        size: Optional[int] = None,
        category: Optional[RecommendationCategory] = None,
        now: Optional[datetime] = None,
    ) -> RecommendationList:
        """Score, diversify and issue recommendations for a reader

        Only the newest request per (user, current article) may issue
        results; an older run that finishes later is rejected.

        Args:
            user_id: reader ID
            current_article_id: article being read, enables similarity
            size: result size N (default ``recommendation_result_size``)
            category: keep only recommendations of this category
            now: reference time for recency

        Returns:
            RecommendationList: issued recommendations, highest score first

        Raises:
            ArticleNotFoundException: ``current_article_id`` does not exist
            StaleRecommendationRequestException: superseded by a newer request
        """
        size = size or settings.recommendation_result_size
        now = now or now_utc()
        key = self.tracker.key(user_id, current_article_id)
        token = self.tracker.begin(key)

        try:
            profile = await self.preference_service.get_or_create_profile(user_id)
            behavior = await self.preference_service.get_behavior(user_id)
            weights = await self.get_weights()

            articles = await self.article_repository.get_published(
                limit=settings.recommendation_candidate_limit
            )
            items = [to_content_item(article) for article in articles]

            current = None
            if current_article_id is not None:
                current = await self._load_current_item(current_article_id, items)

            with measure_time() as timer:
                scored = await self.engine.score_candidates(
                    items,
                    profile,
                    behavior,
                    weights,
                    current_item_id=current_article_id,
                    now=now,
                    current_item=current,
                )

            if category is not None:
                scored = [s for s in scored if s.category == category]

            ranked = rerank(scored, target_size=size)

            if not self.tracker.is_current(key, token):
                logger.info(
                    "Discarding superseded recommendation run",
                    extra={"request_id": get_request_id(), "user_id": user_id},
                )
                raise StaleRecommendationRequestException(user_id, current_article_id)

            issued = await self._issue(user_id, current_article_id, ranked)

            logger.info(
                "Recommendations generated",
                extra={
                    "request_id": get_request_id(),
                    "user_id": user_id,
                    "current_article_id": current_article_id,
                    "candidates": len(items),
                    "returned": len(issued),
                    "scoring_ms": round(timer["elapsed_ms"], 2),
                },
            )

            return RecommendationList(
                user_id=user_id,
                current_article_id=current_article_id,
                total_candidates=len(scored),
                recommendations=issued,
                weights=weights,
                generated_at=now,
            )
        finally:
            self.tracker.finish(key, token)

    async def _issue(
        self,
        user_id: str,
        current_article_id: Optional[str],
        ranked: list[RecommendationScore],
    ) -> list[RecommendationScore]:
        issued = [
            score.model_copy(update={"recommendation_id": generate_recommendation_id()})
            for score in ranked
        ]
        if issued:
            await self.repository.create_issued_many(
                [
                    IssuedRecommendation(
                        id=score.recommendation_id,
                        user_id=user_id,
                        article_id=score.article_id,
                        current_article_id=current_article_id,
                        score=score.score,
                        confidence=score.confidence,
                        category=score.category.value,
                        content_category=score.content_category,
                        reasons=list(score.reasons),
                    )
                    for score in issued
                ]
            )
        return issued

    async def get_issued(self, recommendation_id: str) -> IssuedRecommendation:
        """Look up an issued recommendation

        Raises:
            RecommendationNotFoundException: no such recommendation
        """
        issued = await self.repository.get_issued(recommendation_id)
        if issued is None:
            raise RecommendationNotFoundException(recommendation_id)
        return issued
