"""Text similarity classifiers

The scoring engine receives a ``SimilarityClassifier`` and treats it as a
best-effort enhancement over its deterministic heuristic.
"""

import math
import re
from abc import ABC, abstractmethod

from app.core.config import settings
from app.core.llm import (
    LLMMessage,
    LLMTier,
    call_with_fallback,
    get_observe_decorator,
)
from app.core.logging import get_logger
from app.domains.articles.schemas import ContentItem
from app.domains.recommendations.exceptions import SimilarityParseError
from app.domains.recommendations.prompts import (
    SIMILARITY_SYSTEM_PROMPT,
    SIMILARITY_USER_PROMPT,
)

logger = get_logger(__name__)
observe = get_observe_decorator()

_LEADING_NUMBER = re.compile(r"^[-+]?(\d+(\.\d*)?|\.\d+)")


def parse_similarity_score(raw: str) -> float:
    """Parse a model reply into a score in [0, 1]

    Accepts a bare number, optionally followed by trailing text
    (``"0.8"``, ``"0.75 - same topic"``). Out-of-range values are clamped.

    Args:
        raw: model output

    Returns:
        float: score in [0, 1]

    Raises:
        SimilarityParseError: no leading number, or NaN/infinity
    """
    text = (raw or "").strip()
    match = _LEADING_NUMBER.match(text)
    if not match:
        raise SimilarityParseError(text)

    value = float(match.group(0))
    if math.isnan(value) or math.isinf(value):
        raise SimilarityParseError(text)

    return min(max(value, 0.0), 1.0)


class SimilarityClassifier(ABC):
    """Scores how similar a candidate article is to the one being read"""

    @abstractmethod
    async def classify(
        self, current: ContentItem, candidate: ContentItem
    ) -> float:
        """Return a similarity score in [0, 1]

        Implementations may raise; the scoring engine falls back to its
        heuristic on any error.
        """
        pass


class LLMSimilarityClassifier(SimilarityClassifier):
    """Asks an LLM tier for a similarity score"""

    def __init__(self, tier: LLMTier | None = None, max_tokens: int = 8):
        self.tier = tier or LLMTier(settings.similarity_llm_tier)
        self.max_tokens = max_tokens

    def build_messages(
        self, current: ContentItem, candidate: ContentItem
    ) -> list[LLMMessage]:
        return [
            LLMMessage(role="system", content=SIMILARITY_SYSTEM_PROMPT),
            LLMMessage(
                role="user",
                content=SIMILARITY_USER_PROMPT.format(
                    current_title=current.title,
                    current_excerpt=current.excerpt,
                    candidate_title=candidate.title,
                    candidate_excerpt=candidate.excerpt,
                ),
            ),
        ]

    @observe(name="similarity_classify")
    async def classify(
        self, current: ContentItem, candidate: ContentItem
    ) -> float:
        result = await call_with_fallback(
            tier=self.tier,
            messages=self.build_messages(current, candidate),
            temperature=0,
            max_tokens=self.max_tokens,
        )
        score = parse_similarity_score(result.content)
        logger.debug(
            f"LLM similarity {current.id} -> {candidate.id}: {score:.3f} "
            f"(model={result.model})"
        )
        return score
