"""Insight generation

Derives advisory insights by comparing the analytics of the current window
with the window of the same length just before it. Pure functions only;
persistence lives in the service.
"""

import uuid
from datetime import datetime
from typing import Iterable, Optional

from app.core.utils.datetime import now_utc
from app.domains.feedback.schemas import (
    ImpactLevel,
    InsightMetrics,
    InsightType,
    RecommendationAnalytics,
    RecommendationInsight,
)

MIN_SAMPLE_SIZE = 3

RATING_DROP_RATIO = 0.10  # relative
SEVERE_RATING_DROP_RATIO = 0.25
HELPFULNESS_DROP = 0.10  # absolute
SLOT_SHARE_SHIFT = 0.10  # absolute share of evaluations
LARGE_SLOT_SHARE_SHIFT = 0.20
LOW_HELPFULNESS = 0.5
SLOT_RATING_GAP = 0.5
TARGET_RATING = 4.0
TARGET_HELPFULNESS = 0.7

_IMPACT_RANK = {ImpactLevel.HIGH: 0, ImpactLevel.MEDIUM: 1, ImpactLevel.LOW: 2}


def insight_confidence(sample_size: int) -> int:
    """40% base, +5 per evaluation, capped at 95"""
    return min(95, 40 + 5 * sample_size)


def _r(value: float) -> float:
    return round(value, 4)


class _Builder:
    def __init__(self, current: RecommendationAnalytics, generated_at: datetime):
        self.timeframe = current.timeframe
        self.generated_at = generated_at
        self.items: list[RecommendationInsight] = []

    def add(
        self,
        insight_type: InsightType,
        title: str,
        description: str,
        impact: ImpactLevel,
        sample_size: int,
        action_items: list[str],
        before: float,
        target: float,
        after: Optional[float] = None,
        category: Optional[str] = None,
    ) -> None:
        self.items.append(
            RecommendationInsight(
                id=f"insight_{uuid.uuid4().hex}",
                type=insight_type,
                title=title,
                description=description,
                impact=impact,
                confidence=insight_confidence(sample_size),
                action_items=action_items,
                metrics=InsightMetrics(
                    before=_r(before),
                    after=None if after is None else _r(after),
                    target=_r(target),
                ),
                timeframe=self.timeframe,
                category=category,
                generated_at=self.generated_at,
            )
        )


def _category_rating_drops(
    b: _Builder, current: RecommendationAnalytics, previous: RecommendationAnalytics
) -> None:
    for name, now_perf in current.category_performance.items():
        before = previous.category_performance.get(name)
        if before is None or before.count < MIN_SAMPLE_SIZE:
            continue
        if now_perf.count < MIN_SAMPLE_SIZE or before.avg_rating <= 0:
            continue

        drop = (before.avg_rating - now_perf.avg_rating) / before.avg_rating
        if drop < RATING_DROP_RATIO:
            continue

        b.add(
            InsightType.PERFORMANCE,
            title=f"Rating drop in {name}",
            description=(
                f"Average rating for {name} fell {drop:.0%} "
                f"({before.avg_rating:.2f} -> {now_perf.avg_rating:.2f})."
            ),
            impact=(
                ImpactLevel.HIGH
                if drop >= SEVERE_RATING_DROP_RATIO
                else ImpactLevel.MEDIUM
            ),
            sample_size=now_perf.count,
            action_items=[
                f"Review recent {name} recommendations with low ratings",
                "Raise the personalized weight for readers of this category",
                "Check editorial quality of recently published articles",
            ],
            before=before.avg_rating,
            after=now_perf.avg_rating,
            target=max(before.avg_rating, TARGET_RATING),
            category=name,
        )


def _helpfulness_drop(
    b: _Builder, current: RecommendationAnalytics, previous: RecommendationAnalytics
) -> None:
    if (
        current.total_votes < MIN_SAMPLE_SIZE
        or previous.total_votes < MIN_SAMPLE_SIZE
    ):
        return

    drop = previous.helpfulness_rate - current.helpfulness_rate
    if drop < HELPFULNESS_DROP:
        return

    b.add(
        InsightType.PERFORMANCE,
        title="Helpfulness rate declining",
        description=(
            f"Helpful votes fell from {previous.helpfulness_rate:.0%} "
            f"to {current.helpfulness_rate:.0%}."
        ),
        impact=ImpactLevel.HIGH,
        sample_size=current.total_votes,
        action_items=[
            "Inspect negative comments for recurring complaints",
            "Rebalance trending and similarity weights",
        ],
        before=previous.helpfulness_rate * 100,
        after=current.helpfulness_rate * 100,
        target=max(previous.helpfulness_rate, TARGET_HELPFULNESS) * 100,
    )


def _time_slot_shifts(
    b: _Builder, current: RecommendationAnalytics, previous: RecommendationAnalytics
) -> None:
    if (
        current.total_evaluations < MIN_SAMPLE_SIZE
        or previous.total_evaluations < MIN_SAMPLE_SIZE
    ):
        return

    slots = list(current.time_slot_performance)
    slots += [s for s in previous.time_slot_performance if s not in slots]

    for slot in slots:
        now_perf = current.time_slot_performance.get(slot)
        before_perf = previous.time_slot_performance.get(slot)
        now_share = (now_perf.count if now_perf else 0) / current.total_evaluations
        before_share = (
            before_perf.count if before_perf else 0
        ) / previous.total_evaluations

        shift = now_share - before_share
        if abs(shift) < SLOT_SHARE_SHIFT:
            continue

        direction = "more" if shift > 0 else "less"
        b.add(
            InsightType.USER_BEHAVIOR,
            title=f"Readers engage {direction} in the {slot}",
            description=(
                f"Share of evaluations in the {slot} moved from "
                f"{before_share:.0%} to {now_share:.0%}."
            ),
            impact=(
                ImpactLevel.MEDIUM
                if abs(shift) >= LARGE_SLOT_SHARE_SHIFT
                else ImpactLevel.LOW
            ),
            sample_size=current.total_evaluations,
            action_items=[
                f"Adjust recommendation refresh timing for the {slot}",
                f"Schedule featured articles {'into' if shift > 0 else 'away from'} the {slot}",
            ],
            before=before_share * 100,
            after=now_share * 100,
            target=now_share * 100,
        )


def _content_gaps(
    b: _Builder, current: RecommendationAnalytics, previous: RecommendationAnalytics
) -> None:
    for name, perf in current.category_performance.items():
        if perf.votes < MIN_SAMPLE_SIZE or perf.helpfulness_rate >= LOW_HELPFULNESS:
            continue
        b.add(
            InsightType.CONTENT_GAP,
            title=f"Weak coverage in {name}",
            description=(
                f"Only {perf.helpfulness_rate:.0%} of votes on {name} "
                "recommendations were helpful."
            ),
            impact=ImpactLevel.MEDIUM,
            sample_size=perf.votes,
            action_items=[
                f"Commission more {name} articles",
                f"Improve tagging of {name} articles",
            ],
            before=perf.helpfulness_rate * 100,
            target=TARGET_HELPFULNESS * 100,
            category=name,
        )

    for name, perf in previous.category_performance.items():
        if perf.count < MIN_SAMPLE_SIZE or name in current.category_performance:
            continue
        b.add(
            InsightType.CONTENT_GAP,
            title=f"No recommendations evaluated in {name}",
            description=(
                f"{name} had {perf.count} evaluations in the previous "
                "window and none in this one."
            ),
            impact=ImpactLevel.LOW,
            sample_size=perf.count,
            action_items=[
                f"Check that {name} articles are still being published",
                f"Verify {name} is not filtered out by the diversity quota",
            ],
            before=float(perf.count),
            after=0.0,
            target=float(perf.count),
            category=name,
        )


def _slot_optimizations(b: _Builder, current: RecommendationAnalytics) -> None:
    if current.total_evaluations < MIN_SAMPLE_SIZE:
        return

    for slot, perf in current.time_slot_performance.items():
        if perf.count < MIN_SAMPLE_SIZE:
            continue
        gap = current.average_rating - perf.avg_rating
        if gap < SLOT_RATING_GAP:
            continue
        b.add(
            InsightType.OPTIMIZATION,
            title=f"Underperforming {slot} recommendations",
            description=(
                f"Recommendations rated in the {slot} average "
                f"{perf.avg_rating:.2f}, {gap:.2f} below overall."
            ),
            impact=ImpactLevel.MEDIUM if gap >= 1.0 else ImpactLevel.LOW,
            sample_size=perf.count,
            action_items=[
                f"Boost recency for the {slot}",
                f"Favor shorter articles in the {slot}",
            ],
            before=perf.avg_rating,
            target=current.average_rating,
        )


def generate_insights(
    current: RecommendationAnalytics,
    previous: RecommendationAnalytics,
    now: Optional[datetime] = None,
) -> list[RecommendationInsight]:
    """Compare two analytics windows and return advisory insights

    Trend rules (rating drops, helpfulness drop, time-slot shifts) need at
    least ``MIN_SAMPLE_SIZE`` evaluations on both sides; current-window rules
    (weak categories, weak time slots) only on the current side.

    Args:
        current: analytics of the latest window
        previous: analytics of the window before it
        now: generation timestamp

    Returns:
        list[RecommendationInsight]: high impact first, then by confidence
    """
    builder = _Builder(current, now or now_utc())
    if current.total_evaluations == 0 and previous.total_evaluations == 0:
        return []

    _category_rating_drops(builder, current, previous)
    _helpfulness_drop(builder, current, previous)
    _time_slot_shifts(builder, current, previous)
    _content_gaps(builder, current, previous)
    _slot_optimizations(builder, current)

    return sorted(
        builder.items,
        key=lambda i: (_IMPACT_RANK[i.impact], -i.confidence),
    )


def filter_insights(
    insights: Iterable[RecommendationInsight],
    insight_type: Optional[InsightType] = None,
    category: Optional[str] = None,
) -> list[RecommendationInsight]:
    """Keep insights matching the type and/or category filter"""
    return [
        i
        for i in insights
        if (insight_type is None or i.type == insight_type)
        and (category is None or i.category == category)
    ]
