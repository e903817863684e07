"""Recommendation scoring engine

Each candidate gets five sub-scores in [0, 1]:

- personalized: preference and behavior match
- trending: normalized engagement
- similarity: closeness to the article being read (only with a current item)
- editorial: priority, status and featured image
- recency: step function on article age

final = p*Wp/100 + t*Wt/100 + s*Ws/100 + e*We/100 + r*recency_boost,
clamped to [0, 1]. Sub-scores are rounded to 6 decimals so that boundary
cases (e.g. 0.4 + 0.3 + 0.2 + 0.1) land exactly on 1.0.
"""

import asyncio
import math
import numbers
from datetime import datetime
from typing import Callable, Optional, Sequence

from app.core.config import settings
from app.core.logging import get_logger
from app.core.utils.datetime import hours_between, now_utc
from app.domains.articles.models import ArticlePriority, ArticleStatus
from app.domains.articles.schemas import ContentItem
from app.domains.preferences.models import ReadingTime
from app.domains.preferences.schemas import (
    BehaviorRecord,
    UserPreferenceProfile,
)
from app.domains.recommendations.schemas import (
    EngineWeights,
    RecommendationCategory,
    RecommendationScore,
    SubScores,
)
from app.domains.recommendations.similarity import SimilarityClassifier

logger = get_logger(__name__)

PRECISION = 6

# Category/reason thresholds (strictly greater than)
PERSONALIZED_THRESHOLD = 0.6
TRENDING_THRESHOLD = 0.7
SIMILARITY_THRESHOLD = 0.6
EDITORIAL_THRESHOLD = 0.8

REASON_PERSONALIZED = "Matches your interests"
REASON_TRENDING = "Trending now"
REASON_SIMILAR = "Similar to the article you are reading"
REASON_EDITORIAL = "Editorial priority"

PRIORITY_SCORES = {
    ArticlePriority.URGENT: 0.5,
    ArticlePriority.HIGH: 0.3,
    ArticlePriority.NORMAL: 0.1,
}
STATUS_SCORES = {
    ArticleStatus.PUBLISHED: 0.3,
    ArticleStatus.SCHEDULED: 0.2,
}

# (upper bound in hours, score); older items get RECENCY_FLOOR
RECENCY_STEPS = ((1, 1.0), (6, 0.8), (24, 0.6), (72, 0.4))
RECENCY_FLOOR = 0.2


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(max(value, low), high)


def _round(value: float) -> float:
    return round(value, PRECISION)


class ScoringEngine:
    """Scores candidate articles for one reader

    Args:
        classifier: optional similarity classifier; without one the
            deterministic heuristic is used
        reading_speed_wpm: words per minute for read-time estimates
        similarity_timeout: seconds to wait for the classifier
        max_concurrency: candidates scored at once by ``score_candidates``
    """

    def __init__(
        self,
        classifier: Optional[SimilarityClassifier] = None,
        reading_speed_wpm: Optional[int] = None,
        similarity_timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.classifier = classifier
        self.reading_speed_wpm = reading_speed_wpm or settings.reading_speed_wpm
        self.similarity_timeout = (
            similarity_timeout
            if similarity_timeout is not None
            else settings.similarity_timeout_seconds
        )
        self.max_concurrency = max(
            max_concurrency or settings.similarity_max_concurrency, 1
        )

    # ------------------------------------------------------------------
    # Sub-scores
    # ------------------------------------------------------------------

    def estimate_read_minutes(self, item: ContentItem) -> float:
        return len(item.content.split()) / self.reading_speed_wpm

    def matches_reading_time(
        self, item: ContentItem, preference: ReadingTime
    ) -> bool:
        minutes = self.estimate_read_minutes(item)
        if preference == ReadingTime.SHORT:
            return minutes < 3
        if preference == ReadingTime.MEDIUM:
            return 3 <= minutes <= 8
        return minutes > 8

    def calculate_personalized_score(
        self,
        item: ContentItem,
        profile: UserPreferenceProfile,
        behavior: BehaviorRecord,
    ) -> float:
        score = 0.0
        if item.category_name and item.category_name in profile.preferred_categories:
            score += 0.4
        if self.matches_reading_time(item, profile.reading_time):
            score += 0.3
        if item.language == profile.language:
            score += 0.2
        if item.id in behavior.liked_article_ids:
            score += 0.1
        return _clamp(_round(score))

    def calculate_trending_score(self, item: ContentItem) -> float:
        analytics = item.analytics
        if analytics is None:
            return 0.0

        views = min(analytics.views / 10000, 1.0)
        likes = min(analytics.likes / 1000, 1.0)
        shares = min(analytics.shares / 500, 1.0)
        ctr = _clamp(analytics.click_through_rate or 0.0)

        return _clamp(_round(views * 0.3 + likes * 0.3 + shares * 0.3 + ctr * 0.1))

    def heuristic_similarity(
        self, item: ContentItem, current: ContentItem
    ) -> float:
        """Category match (0.5) plus tag overlap (0.2 per tag, max 0.5)"""
        score = 0.0
        if item.category_name and item.category_name == current.category_name:
            score += 0.5
        overlap = len(set(item.tags) & set(current.tags))
        score += min(overlap * 0.2, 0.5)
        return _clamp(_round(score))

    async def calculate_similarity_score(
        self, item: ContentItem, current: Optional[ContentItem]
    ) -> float:
        """Similarity to the current item, never raising

        The classifier runs under ``similarity_timeout``; timeouts, errors and
        anything other than a finite real number fall back to
        ``heuristic_similarity``.
        """
        if current is None:
            return 0.0
        if self.classifier is None:
            return self.heuristic_similarity(item, current)

        try:
            score = await asyncio.wait_for(
                self.classifier.classify(current, item),
                timeout=self.similarity_timeout,
            )
            if not isinstance(score, numbers.Real) or not math.isfinite(score):
                raise ValueError(f"not a finite number: {score!r}")
        except asyncio.TimeoutError:
            logger.warning(
                f"Similarity classifier timed out after "
                f"{self.similarity_timeout}s for {item.id}; using heuristic"
            )
            return self.heuristic_similarity(item, current)
        except Exception as e:
            logger.warning(
                f"Similarity classifier failed for {item.id}: {e}; using heuristic"
            )
            return self.heuristic_similarity(item, current)

        return _clamp(_round(float(score)))

    def calculate_editorial_score(self, item: ContentItem) -> float:
        score = PRIORITY_SCORES.get(item.priority, 0.0)
        score += STATUS_SCORES.get(item.status, 0.0)
        if item.featured_image:
            score += 0.2
        return _clamp(_round(score))

    def calculate_recency_score(self, item: ContentItem, now: datetime) -> float:
        """Step function on hours since creation; future dates count as new"""
        age_hours = hours_between(item.created_at, now)
        for upper_bound, score in RECENCY_STEPS:
            if age_hours < upper_bound:
                return score
        return RECENCY_FLOOR

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    @staticmethod
    def combine(sub_scores: SubScores, weights: EngineWeights) -> float:
        total = (
            sub_scores.personalized * weights.personalized_weight / 100
            + sub_scores.trending * weights.trending_weight / 100
            + sub_scores.similarity * weights.similarity_weight / 100
            + sub_scores.editorial * weights.editorial_weight / 100
            + sub_scores.recency * weights.recency_boost
        )
        return _clamp(_round(total))

    @staticmethod
    def assign_category(sub_scores: SubScores) -> RecommendationCategory:
        if sub_scores.trending > TRENDING_THRESHOLD:
            return RecommendationCategory.TRENDING
        if sub_scores.similarity > SIMILARITY_THRESHOLD:
            return RecommendationCategory.SIMILAR
        if sub_scores.editorial > EDITORIAL_THRESHOLD:
            return RecommendationCategory.EDITORIAL
        return RecommendationCategory.PERSONALIZED

    @staticmethod
    def build_reasons(sub_scores: SubScores) -> list[str]:
        reasons = []
        if sub_scores.personalized > PERSONALIZED_THRESHOLD:
            reasons.append(REASON_PERSONALIZED)
        if sub_scores.trending > TRENDING_THRESHOLD:
            reasons.append(REASON_TRENDING)
        if sub_scores.similarity > SIMILARITY_THRESHOLD:
            reasons.append(REASON_SIMILAR)
        if sub_scores.editorial > EDITORIAL_THRESHOLD:
            reasons.append(REASON_EDITORIAL)
        return reasons

    @staticmethod
    def calculate_confidence(score: float, reason_count: int) -> float:
        return _clamp(_round(score + min(reason_count * 0.1, 0.3)))

    def _safe(self, name: str, item: ContentItem, fn: Callable[[], float]) -> float:
        try:
            return fn()
        except Exception as e:
            logger.warning(f"{name} score failed for {item.id}: {e}; using 0")
            return 0.0

    async def score_candidate(
        self,
        item: ContentItem,
        profile: UserPreferenceProfile,
        behavior: BehaviorRecord,
        weights: EngineWeights,
        current: Optional[ContentItem] = None,
        now: Optional[datetime] = None,
    ) -> RecommendationScore:
        """Score one candidate

        A failing sub-score contributes 0; the candidate is still scored.
        """
        now = now or now_utc()

        sub_scores = SubScores(
            personalized=self._safe(
                "personalized",
                item,
                lambda: self.calculate_personalized_score(item, profile, behavior),
            ),
            trending=self._safe(
                "trending", item, lambda: self.calculate_trending_score(item)
            ),
            similarity=await self.calculate_similarity_score(item, current),
            editorial=self._safe(
                "editorial", item, lambda: self.calculate_editorial_score(item)
            ),
            recency=self._safe(
                "recency", item, lambda: self.calculate_recency_score(item, now)
            ),
        )

        score = self.combine(sub_scores, weights)
        reasons = self.build_reasons(sub_scores)

        return RecommendationScore(
            article_id=item.id,
            score=score,
            reasons=reasons,
            confidence=self.calculate_confidence(score, len(reasons)),
            category=self.assign_category(sub_scores),
            content_category=item.category_name,
            sub_scores=sub_scores,
        )

    async def score_candidates(
        self,
        items: Sequence[ContentItem],
        profile: UserPreferenceProfile,
        behavior: BehaviorRecord,
        weights: EngineWeights,
        current_item_id: Optional[str] = None,
        now: Optional[datetime] = None,
        current_item: Optional[ContentItem] = None,
    ) -> list[RecommendationScore]:
        """Score every eligible candidate

        Only published items are scored and the current item is never its
        own candidate. Candidates are scored concurrently, at most
        ``max_concurrency`` at a time; the result does not depend on which
        classifier call finishes first.

        Args:
            items: candidate articles
            profile: reader preferences
            behavior: reader behavior
            weights: engine weights
            current_item_id: ID of the article being read, if any
            now: reference time for recency (default: current UTC)
            current_item: the current article when it is not among ``items``

        Returns:
            list[RecommendationScore]: sorted by score, highest first
        """
        now = now or now_utc()

        current = current_item
        if current is None and current_item_id is not None:
            current = next((i for i in items if i.id == current_item_id), None)
        if current is not None:
            current_item_id = current.id

        candidates = [
            item
            for item in items
            if item.status == ArticleStatus.PUBLISHED and item.id != current_item_id
        ]

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def score_one(item: ContentItem) -> Optional[RecommendationScore]:
            async with semaphore:
                try:
                    return await self.score_candidate(
                        item, profile, behavior, weights, current=current, now=now
                    )
                except Exception as e:
                    logger.warning(f"Skipping candidate {item.id}: {e}")
                    return None

        results = await asyncio.gather(*(score_one(item) for item in candidates))
        scores = [score for score in results if score is not None]

        scores.sort(key=lambda s: s.score, reverse=True)
        logger.debug(
            f"Scored {len(scores)}/{len(items)} candidates "
            f"(current={current_item_id})"
        )
        return scores
