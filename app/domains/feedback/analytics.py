"""Feedback aggregation

Turns the feedback log into ``RecommendationAnalytics`` for a timeframe
window. Every rate is 0 when its denominator is 0.
"""

import re
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

import numpy as np

from app.core.utils.datetime import ensure_utc, now_utc, time_of_day_bucket
from app.domains.feedback.schemas import (
    CategoryPerformance,
    CommonFeedback,
    FeedbackRecord,
    RecommendationAnalytics,
    TimeSlotPerformance,
    Timeframe,
)

UNCATEGORIZED = "Uncategorized"
COMMON_FEEDBACK_LIMIT = 5

POSITIVE_RATING = 4
NEGATIVE_RATING = 2

ACCURACY_THRESHOLD = 3.5
RELEVANCE_THRESHOLD = 0.7
CATEGORY_RATING_THRESHOLD = 3.0

_WHITESPACE = re.compile(r"\s+")


def window_bounds(
    timeframe: Timeframe, now: Optional[datetime] = None
) -> tuple[datetime, datetime]:
    """(start, end) of the window ending at ``now``; the start is inclusive"""
    end = ensure_utc(now or now_utc())
    return end - timedelta(days=timeframe.days), end


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(values))


def _votes(feedbacks: Iterable[FeedbackRecord]) -> list[bool]:
    return [f.helpful for f in feedbacks if f.helpful is not None]


def helpfulness_rate(feedbacks: Iterable[FeedbackRecord]) -> float:
    """helpful votes / (helpful + not helpful); unvoted feedback is ignored"""
    votes = _votes(feedbacks)
    if not votes:
        return 0.0
    return float(np.count_nonzero(votes)) / len(votes)


def _slot_of(feedback: FeedbackRecord) -> str:
    return feedback.time_of_day or time_of_day_bucket(feedback.created_at)


def common_comments(
    feedbacks: Iterable[FeedbackRecord], limit: int = COMMON_FEEDBACK_LIMIT
) -> list[str]:
    """Most frequent comments, first-seen wording, ties by first appearance

    Comments are compared case-insensitively with whitespace collapsed.
    """
    counts: Counter[str] = Counter()
    display: dict[str, str] = {}
    for feedback in feedbacks:
        if not feedback.comment:
            continue
        text = _WHITESPACE.sub(" ", feedback.comment).strip()
        if not text:
            continue
        key = text.casefold()
        display.setdefault(key, text)
        counts[key] += 1
    return [display[key] for key, _ in counts.most_common(limit)]


def build_suggestions(analytics: RecommendationAnalytics) -> list[str]:
    """Rule-based improvement suggestions"""
    if analytics.total_evaluations == 0:
        return []

    suggestions = []
    if analytics.average_rating < ACCURACY_THRESHOLD:
        suggestions.append(
            f"Improve algorithm accuracy: average rating "
            f"{analytics.average_rating:.2f} is below {ACCURACY_THRESHOLD}"
        )
    if analytics.helpfulness_rate < RELEVANCE_THRESHOLD:
        suggestions.append(
            f"Improve recommendation relevance: helpfulness rate "
            f"{analytics.helpfulness_rate:.0%} is below {RELEVANCE_THRESHOLD:.0%}"
        )

    weak = [
        name
        for name, perf in analytics.category_performance.items()
        if perf.avg_rating < CATEGORY_RATING_THRESHOLD
    ]
    if weak:
        suggestions.append(f"Underperforming categories: {', '.join(weak)}")
    return suggestions


def compute_analytics(
    feedbacks: Iterable[FeedbackRecord],
    timeframe: Timeframe,
    now: Optional[datetime] = None,
    include_end: bool = True,
) -> RecommendationAnalytics:
    """Aggregate the feedback that falls inside the timeframe window

    Args:
        feedbacks: feedback log (any order, may extend beyond the window)
        timeframe: day, week, month or quarter
        now: window end (default: current UTC)
        include_end: count feedback stamped exactly at ``now``; turned off
            for the earlier of two adjacent windows

    Returns:
        RecommendationAnalytics: zeroed when no feedback is in the window
    """
    start, end = window_bounds(timeframe, now)

    def in_range(created_at: datetime) -> bool:
        created_at = ensure_utc(created_at)
        return start <= created_at and (
            created_at <= end if include_end else created_at < end
        )

    in_window = [f for f in feedbacks if in_range(f.created_at)]

    by_category: dict[str, list[FeedbackRecord]] = {}
    by_slot: dict[str, list[FeedbackRecord]] = {}
    for feedback in in_window:
        by_category.setdefault(feedback.category or UNCATEGORIZED, []).append(feedback)
        by_slot.setdefault(_slot_of(feedback), []).append(feedback)

    analytics = RecommendationAnalytics(
        timeframe=timeframe,
        window_start=start,
        window_end=end,
        total_evaluations=len(in_window),
        average_rating=_mean([f.rating for f in in_window]),
        helpfulness_rate=helpfulness_rate(in_window),
        total_votes=len(_votes(in_window)),
        category_performance={
            name: CategoryPerformance(
                avg_rating=_mean([f.rating for f in members]),
                count=len(members),
                helpfulness_rate=helpfulness_rate(members),
                votes=len(_votes(members)),
            )
            for name, members in by_category.items()
        },
        time_slot_performance={
            slot: TimeSlotPerformance(
                avg_rating=_mean([f.rating for f in members]),
                count=len(members),
            )
            for slot, members in by_slot.items()
        },
        common_feedback=CommonFeedback(
            positive=common_comments(
                f for f in in_window if f.rating >= POSITIVE_RATING
            ),
            negative=common_comments(
                f for f in in_window if f.rating <= NEGATIVE_RATING
            ),
        ),
    )

    analytics.improvement_suggestions = build_suggestions(analytics)
    return analytics
