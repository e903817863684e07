"""Tier-based LLM fallback

Callers pick a tier, not a model. The fallback order for each tier comes from
settings (``llm_<tier>_models``).
"""

from typing import Optional

from app.core.config import settings
from app.core.llm.provider import acompletion_raw
from app.core.llm.types import (
    AllProvidersFailedError,
    LLMMessage,
    LLMProviderError,
    LLMResult,
    LLMTier,
)
from app.core.logging import get_logger
from app.core.utils.time import measure_time

logger = get_logger(__name__)


def get_models_for_tier(tier: LLMTier) -> list[str]:
    """Configured fallback order for a tier

    Raises:
        ValueError: no models are configured for the tier
    """
    models = list(getattr(settings, f"llm_{tier.value}_models", []) or [])
    if not models:
        raise ValueError(
            f"No available models for tier: {tier.value}. "
            f"Set LLM_{tier.value.upper()}_MODELS."
        )
    return models


async def call_with_fallback(
    tier: LLMTier,
    messages: list[LLMMessage],
    temperature: float = 0.7,
    max_tokens: Optional[int] = None,
    **kwargs,
) -> LLMResult:
    """Call the tier's models in order until one succeeds

    Args:
        tier: model tier
        messages: chat messages
        temperature: sampling temperature
        max_tokens: completion token limit
        **kwargs: passed through to the provider

    Returns:
        LLMResult: result of the first model that succeeded

    Raises:
        AllProvidersFailedError: every model failed

    Example:
        from app.core.llm import LLMTier, LLMMessage, call_with_fallback

        result = await call_with_fallback(
            tier=LLMTier.LIGHT,
            messages=[LLMMessage(role="user", content="Hello!")],
            temperature=0,
        )
    """
    models = get_models_for_tier(tier)
    attempted_models = []

    for model_name in models:
        try:
            logger.info(f"Attempting LLM call with tier={tier.value}, model={model_name}")
            with measure_time() as timer:
                result = await acompletion_raw(
                    model=model_name,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    **kwargs,
                )
            logger.info(
                f"LLM call succeeded with model={model_name} "
                f"({timer['elapsed_ms']:.0f}ms, in={result.input_tokens}, "
                f"out={result.output_tokens})"
            )
            return result

        except LLMProviderError as e:
            attempted_models.append(model_name)
            logger.warning(
                f"Model {model_name} failed (tier={tier.value}): "
                f"{e.detail_info['error']}. Trying next model..."
            )
            continue

    raise AllProvidersFailedError(tier=tier.value, attempts=attempted_models)
