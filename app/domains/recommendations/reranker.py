"""Diversity re-ranker

Caps how many recommendations a single article category can contribute.
"""

import math
from typing import Sequence

from app.domains.recommendations.schemas import RecommendationScore

UNCATEGORIZED = "Uncategorized"
DEFAULT_TARGET_SIZE = 12


def rerank(
    scored: Sequence[RecommendationScore],
    target_size: int = DEFAULT_TARGET_SIZE,
) -> list[RecommendationScore]:
    """Diversify a scored list by article category

    Each category keeps at most ``ceil(target_size / category_count)`` of its
    best-scored items. The survivors are re-sorted by score and truncated to
    ``target_size``.

    Args:
        scored: scored candidates in any order
        target_size: maximum result size N

    Returns:
        list[RecommendationScore]: at most N items, highest score first

    Raises:
        ValueError: target_size < 1

    Example::

        ranked = rerank(scores, target_size=12)
    """
    if target_size < 1:
        raise ValueError(f"target_size must be >= 1, got {target_size}")
    if not scored:
        return []

    groups: dict[str, list[RecommendationScore]] = {}
    for item in scored:
        groups.setdefault(item.content_category or UNCATEGORIZED, []).append(item)

    quota = math.ceil(target_size / len(groups))

    selected: list[RecommendationScore] = []
    for members in groups.values():
        selected.extend(sorted(members, key=lambda s: s.score, reverse=True)[:quota])

    selected.sort(key=lambda s: s.score, reverse=True)
    return selected[:target_size]
