"""ScoringEngine unit tests"""

import asyncio
import math
import time
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from app.domains.articles.models import (
    ArticleLanguage,
    ArticlePriority,
    ArticleStatus,
)
from app.domains.articles.schemas import ArticleAnalytics, ContentItem
from app.domains.preferences.models import ReadingTime
from app.domains.preferences.schemas import BehaviorRecord
from app.domains.recommendations.schemas import (
    EngineWeights,
    RecommendationCategory,
    SubScores,
)
from app.domains.recommendations.scoring import (
    REASON_EDITORIAL,
    REASON_PERSONALIZED,
    REASON_SIMILAR,
    REASON_TRENDING,
    ScoringEngine,
)
from app.domains.recommendations.similarity import SimilarityClassifier


class FixedClassifier(SimilarityClassifier):
    """Returns a fixed value (or raises it when it is an exception)"""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def classify(self, current: ContentItem, candidate: ContentItem) -> float:
        self.calls += 1
        if isinstance(self.value, Exception):
            raise self.value
        return self.value


class SlowClassifier(SimilarityClassifier):
    async def classify(self, current: ContentItem, candidate: ContentItem) -> float:
        await asyncio.sleep(1)
        return 1.0


class SleepingClassifier(SimilarityClassifier):
    """Sleeps before answering and records how many calls overlap"""

    def __init__(self, delay: float):
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def classify(self, current: ContentItem, candidate: ContentItem) -> float:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return 0.9
        finally:
            self.in_flight -= 1


@pytest.fixture
def engine():
    """Engine without a classifier (heuristic similarity)"""
    return ScoringEngine(reading_speed_wpm=200, similarity_timeout=0.05)


class TestPersonalizedScore:
    """calculate_personalized_score"""

    def test_all_signals_match(self, engine, make_item, profile):
        """Category, length, language and a previous like sum to exactly 1.0"""
        # Given
        item = make_item("sports-1", category="Sports")
        behavior = BehaviorRecord(user_id="reader-1", liked_article_ids=["sports-1"])

        # When
        score = engine.calculate_personalized_score(item, profile, behavior)

        # Then
        assert score == 1.0

    def test_no_signals(self, engine, make_item, profile, behavior):
        item = make_item(
            category="Technology",
            content_words=100,
            language=ArticleLanguage.EN,
        )

        assert engine.calculate_personalized_score(item, profile, behavior) == 0.0

    def test_missing_category_never_matches(self, engine, make_item, profile, behavior):
        item = make_item(category=None)

        # reading time + language only
        assert engine.calculate_personalized_score(item, profile, behavior) == 0.5

    @pytest.mark.parametrize(
        "words,preference,expected",
        [
            (599, ReadingTime.SHORT, True),
            (600, ReadingTime.SHORT, False),
            (600, ReadingTime.MEDIUM, True),
            (1600, ReadingTime.MEDIUM, True),
            (1601, ReadingTime.MEDIUM, False),
            (1601, ReadingTime.LONG, True),
            (1600, ReadingTime.LONG, False),
        ],
    )
    def test_reading_time_buckets(self, engine, make_item, words, preference, expected):
        """short < 3 min, medium 3-8 min inclusive, long > 8 min at 200 wpm"""
        item = make_item(content_words=words)

        assert engine.matches_reading_time(item, preference) is expected

    def test_reading_speed_is_configurable(self, make_item):
        engine = ScoringEngine(reading_speed_wpm=100)

        assert engine.estimate_read_minutes(make_item(content_words=500)) == 5


class TestTrendingScore:
    """calculate_trending_score"""

    def test_saturated_engagement(self, engine, make_item, viral_analytics):
        item = make_item(analytics=viral_analytics)

        assert engine.calculate_trending_score(item) == 1.0

    def test_missing_analytics_is_zero(self, engine, make_item):
        assert engine.calculate_trending_score(make_item(analytics=None)) == 0.0

    def test_partial_engagement(self, engine, make_item):
        item = make_item(
            analytics=ArticleAnalytics(
                views=5000, likes=100, shares=50, click_through_rate=None
            )
        )

        # 0.5*0.3 + 0.1*0.3 + 0.1*0.3
        assert engine.calculate_trending_score(item) == pytest.approx(0.21)


class TestSimilarityScore:
    """Heuristic and classifier-backed similarity"""

    def test_heuristic_category_and_tags(self, engine, make_item):
        current = make_item("current", tags=["ai", "chips", "gpu"])
        candidate = make_item("candidate", tags=["ai", "chips"])

        assert engine.heuristic_similarity(candidate, current) == pytest.approx(0.9)

    def test_heuristic_tag_overlap_is_capped(self, engine, make_item):
        current = make_item("current", category="World", tags=["a", "b", "c"])
        candidate = make_item("candidate", category="Sports", tags=["a", "b", "c"])

        assert engine.heuristic_similarity(candidate, current) == 0.5

    def test_heuristic_missing_categories_do_not_match(self, engine, make_item):
        current = make_item("current", category=None)
        candidate = make_item("candidate", category=None)

        assert engine.heuristic_similarity(candidate, current) == 0.0

    @pytest.mark.asyncio
    async def test_no_current_item_is_zero(self, make_item):
        classifier = FixedClassifier(0.9)
        engine = ScoringEngine(classifier)

        assert await engine.calculate_similarity_score(make_item(), None) == 0.0
        assert classifier.calls == 0

    @pytest.mark.asyncio
    async def test_classifier_result_used(self, make_item):
        engine = ScoringEngine(FixedClassifier(0.73))

        score = await engine.calculate_similarity_score(
            make_item("candidate"), make_item("current", category="World")
        )

        assert score == 0.73

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "value",
        [RuntimeError("provider down"), math.nan, math.inf, None, "0.9", object()],
    )
    async def test_classifier_failure_falls_back(self, make_item, value):
        """Errors and anything but a finite number fall back to the heuristic"""
        engine = ScoringEngine(FixedClassifier(value))
        current = make_item("current")
        candidate = make_item("candidate")

        score = await engine.calculate_similarity_score(candidate, current)

        # same category, no tags
        assert score == 0.5

    @pytest.mark.asyncio
    async def test_classifier_timeout_falls_back(self, make_item):
        engine = ScoringEngine(SlowClassifier(), similarity_timeout=0.01)

        score = await engine.calculate_similarity_score(
            make_item("candidate"), make_item("current")
        )

        assert score == 0.5


class TestEditorialScore:
    """calculate_editorial_score"""

    def test_normal_published(self, engine, make_item):
        assert engine.calculate_editorial_score(make_item()) == pytest.approx(0.4)

    def test_urgent_published_with_image(self, engine, make_item):
        item = make_item(
            priority=ArticlePriority.URGENT,
            featured_image="https://cdn.example/a.jpg",
        )

        assert engine.calculate_editorial_score(item) == 1.0

    def test_high_scheduled(self, engine, make_item):
        item = make_item(priority=ArticlePriority.HIGH, status=ArticleStatus.SCHEDULED)

        assert engine.calculate_editorial_score(item) == pytest.approx(0.5)

    def test_draft_gets_no_status_bonus(self, engine, make_item):
        item = make_item(status=ArticleStatus.DRAFT)

        assert engine.calculate_editorial_score(item) == pytest.approx(0.1)


class TestRecencyScore:
    """calculate_recency_score step function"""

    @pytest.mark.parametrize(
        "age_hours,expected",
        [
            (0, 1.0),
            (0.99, 1.0),
            (1, 0.8),
            (5.5, 0.8),
            (6, 0.6),
            (23, 0.6),
            (24, 0.4),
            (71, 0.4),
            (72, 0.2),
            (24 * 30, 0.2),
        ],
    )
    def test_steps(self, engine, make_item, fixed_now, age_hours, expected):
        item = make_item(created_at=fixed_now - timedelta(hours=age_hours))

        assert engine.calculate_recency_score(item, fixed_now) == expected

    def test_future_dated_item_counts_as_new(self, engine, make_item, fixed_now):
        item = make_item(created_at=fixed_now + timedelta(hours=3))

        assert engine.calculate_recency_score(item, fixed_now) == 1.0


class TestAggregation:
    """combine, assign_category, build_reasons, calculate_confidence"""

    def test_recency_boost_is_a_fraction_not_a_percentage(self):
        """The four weights are percentages; recency_boost is applied as-is"""
        weights = EngineWeights(
            personalized_weight=0,
            trending_weight=0,
            similarity_weight=0,
            editorial_weight=0,
            recency_boost=0.2,
        )

        assert ScoringEngine.combine(SubScores(recency=1.0), weights) == 0.2

    def test_unnormalized_weights_clamp_to_one(self):
        weights = EngineWeights(
            personalized_weight=100,
            trending_weight=100,
            similarity_weight=100,
            editorial_weight=100,
            recency_boost=1.0,
        )
        sub_scores = SubScores(
            personalized=1, trending=1, similarity=1, editorial=1, recency=1
        )

        assert ScoringEngine.combine(sub_scores, weights) == 1.0

    def test_default_weights_with_perfect_scores(self):
        """0.4 + 0.3 + 0.2 + 0.1 + 0.2 clamps to 1.0"""
        sub_scores = SubScores(
            personalized=1, trending=1, similarity=1, editorial=1, recency=1
        )

        assert ScoringEngine.combine(sub_scores, EngineWeights()) == 1.0

    @pytest.mark.parametrize(
        "sub_scores,expected",
        [
            (SubScores(trending=0.8, similarity=0.9, editorial=0.9), RecommendationCategory.TRENDING),
            (SubScores(trending=0.7, similarity=0.61), RecommendationCategory.SIMILAR),
            (SubScores(similarity=0.6, editorial=0.81), RecommendationCategory.EDITORIAL),
            (SubScores(editorial=0.8, personalized=0.1), RecommendationCategory.PERSONALIZED),
        ],
    )
    def test_assign_category_first_rule_wins(self, sub_scores, expected):
        assert ScoringEngine.assign_category(sub_scores) == expected

    def test_build_reasons(self):
        sub_scores = SubScores(
            personalized=0.9, trending=0.71, similarity=0.6, editorial=0.81
        )

        assert ScoringEngine.build_reasons(sub_scores) == [
            REASON_PERSONALIZED,
            REASON_TRENDING,
            REASON_EDITORIAL,
        ]

    @pytest.mark.parametrize(
        "score,reasons,expected",
        [(0.5, 0, 0.5), (0.5, 1, 0.6), (0.5, 5, 0.8), (0.9, 4, 1.0)],
    )
    def test_confidence(self, score, reasons, expected):
        assert ScoringEngine.calculate_confidence(score, reasons) == pytest.approx(expected)


class TestScoreCandidates:
    """score_candidate and score_candidates"""

    @pytest.mark.asyncio
    async def test_trending_article(self, engine, make_item, profile, behavior, viral_analytics, fixed_now):
        """Saturated engagement is categorized as trending"""
        # Given
        item = make_item(analytics=viral_analytics)

        # When
        result = await engine.score_candidate(
            item, profile, behavior, EngineWeights(), now=fixed_now
        )

        # Then
        assert result.sub_scores.trending == 1.0
        assert result.category == RecommendationCategory.TRENDING
        assert REASON_TRENDING in result.reasons
        assert result.content_category == "Technology"
        assert result.recommendation_id is None

    @pytest.mark.asyncio
    async def test_plain_article_score(self, engine, make_item, profile, behavior, fixed_now):
        """0.5*0.4 + 0.4*0.1 + 1.0*0.2"""
        result = await engine.score_candidate(
            make_item(), profile, behavior, EngineWeights(), now=fixed_now
        )

        assert result.score == pytest.approx(0.44)
        assert result.reasons == []
        assert result.confidence == pytest.approx(0.44)
        assert result.category == RecommendationCategory.PERSONALIZED

    @pytest.mark.asyncio
    async def test_failing_sub_score_contributes_zero(self, engine, make_item, profile, behavior, viral_analytics, fixed_now):
        engine.calculate_trending_score = MagicMock(side_effect=ZeroDivisionError)

        result = await engine.score_candidate(
            make_item(analytics=viral_analytics),
            profile,
            behavior,
            EngineWeights(),
            now=fixed_now,
        )

        assert result.sub_scores.trending == 0.0
        assert result.score == pytest.approx(0.44)

    @pytest.mark.asyncio
    async def test_filters_and_sorts(self, engine, make_item, profile, behavior, viral_analytics, fixed_now):
        """Drafts and the current item are excluded; results sorted by score"""
        items = [
            make_item("plain"),
            make_item("viral", analytics=viral_analytics),
            make_item("draft", status=ArticleStatus.DRAFT),
            make_item("current", tags=["x"]),
        ]

        results = await engine.score_candidates(
            items,
            profile,
            behavior,
            EngineWeights(),
            current_item_id="current",
            now=fixed_now,
        )

        assert [r.article_id for r in results] == ["viral", "plain"]
        assert all(r.sub_scores.similarity == 0.5 for r in results)

    @pytest.mark.asyncio
    async def test_current_item_outside_candidates(self, engine, make_item, profile, behavior, fixed_now):
        current = make_item("current", category="Sports", status=ArticleStatus.DRAFT)

        results = await engine.score_candidates(
            [make_item("sports", category="Sports"), make_item("tech")],
            profile,
            behavior,
            EngineWeights(),
            current_item_id="current",
            now=fixed_now,
            current_item=current,
        )

        by_id = {r.article_id: r for r in results}
        assert by_id["sports"].sub_scores.similarity == 0.5
        assert by_id["tech"].sub_scores.similarity == 0.0

    @pytest.mark.asyncio
    async def test_failing_candidate_is_skipped(self, engine, make_item, profile, behavior, fixed_now):
        original = engine.score_candidate

        async def flaky(item, *args, **kwargs):
            if item.id == "broken":
                raise RuntimeError("bad data")
            return await original(item, *args, **kwargs)

        engine.score_candidate = flaky

        results = await engine.score_candidates(
            [make_item("ok"), make_item("broken")],
            profile,
            behavior,
            EngineWeights(),
            now=fixed_now,
        )

        assert [r.article_id for r in results] == ["ok"]

    @pytest.mark.asyncio
    async def test_empty_candidates(self, engine, profile, behavior):
        assert await engine.score_candidates([], profile, behavior, EngineWeights()) == []

    @pytest.mark.asyncio
    async def test_bad_classifier_value_keeps_candidate(self, make_item, profile, behavior, fixed_now):
        """Only the similarity sub-score degrades"""
        engine = ScoringEngine(FixedClassifier("0.9"), similarity_timeout=0.05)

        results = await engine.score_candidates(
            [make_item("current"), make_item("candidate")],
            profile,
            behavior,
            EngineWeights(),
            current_item_id="current",
            now=fixed_now,
        )

        assert [r.article_id for r in results] == ["candidate"]
        assert results[0].sub_scores.similarity == 0.5

    @pytest.mark.asyncio
    async def test_classifier_calls_run_concurrently(self, make_item, profile, behavior, fixed_now):
        # Given: ten candidates, each classifier call taking 0.2s
        classifier = SleepingClassifier(delay=0.2)
        engine = ScoringEngine(classifier, similarity_timeout=1.0, max_concurrency=10)
        items = [make_item("current")] + [make_item(f"a-{n}") for n in range(10)]

        # When
        started = time.perf_counter()
        results = await engine.score_candidates(
            items,
            profile,
            behavior,
            EngineWeights(),
            current_item_id="current",
            now=fixed_now,
        )
        elapsed = time.perf_counter() - started

        # Then: one round of calls instead of ten
        assert len(results) == 10
        assert all(r.sub_scores.similarity == 0.9 for r in results)
        assert elapsed < 1.0

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, make_item, profile, behavior, fixed_now):
        classifier = SleepingClassifier(delay=0.01)
        engine = ScoringEngine(classifier, similarity_timeout=1.0, max_concurrency=3)
        items = [make_item("current")] + [make_item(f"a-{n}") for n in range(9)]

        results = await engine.score_candidates(
            items,
            profile,
            behavior,
            EngineWeights(),
            current_item_id="current",
            now=fixed_now,
        )

        assert len(results) == 9
        assert classifier.max_in_flight == 3

    @pytest.mark.asyncio
    async def test_repeated_scoring_is_identical(self, engine, make_item, profile, behavior, viral_analytics, fixed_now):
        """Same inputs and reference time give the same scores and categories"""
        items = [
            make_item("plain"),
            make_item("viral", analytics=viral_analytics),
            make_item("sports", category="Sports", tags=["x"]),
            make_item("current", tags=["x"]),
        ]

        async def run():
            return await engine.score_candidates(
                items,
                profile,
                behavior,
                EngineWeights(),
                current_item_id="current",
                now=fixed_now,
            )

        first, second = await run(), await run()

        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]
        assert [(r.article_id, r.score, r.category) for r in first] == [
            (r.article_id, r.score, r.category) for r in second
        ]
