"""LiteLLM provider wrapper

The only module that talks to LiteLLM directly.
"""

import os
from typing import Optional

from litellm import acompletion

from app.core.config import settings
from app.core.llm.types import LLMMessage, LLMProviderError, LLMResult
from app.core.logging import get_logger

logger = get_logger(__name__)


def _setup_api_keys() -> None:
    """Export provider keys; LiteLLM reads them from the environment"""
    os.environ["OPENAI_API_KEY"] = settings.openai_api_key
    os.environ["ANTHROPIC_API_KEY"] = settings.anthropic_api_key
    os.environ["GOOGLE_API_KEY"] = settings.google_api_key


_setup_api_keys()


async def acompletion_raw(
    model: str,
    messages: list[LLMMessage],
    temperature: float = 0.7,
    max_tokens: Optional[int] = None,
    **kwargs,
) -> LLMResult:
    """Call one model through LiteLLM

    Args:
        model: LiteLLM model name (e.g. ``"gpt-4o-mini"``)
        messages: chat messages
        temperature: sampling temperature
        max_tokens: completion token limit
        **kwargs: passed through to LiteLLM

    Returns:
        LLMResult: text and token usage

    Raises:
        LLMProviderError: the provider call failed

    Example:
        messages = [LLMMessage(role="user", content="Rate 0 to 1")]
        result = await acompletion_raw("gpt-4o-mini", messages, temperature=0)
    """
    try:
        response = await acompletion(
            model=model,
            messages=[msg.model_dump() for msg in messages],
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

        choice = response.choices[0]
        usage = response.usage

        return LLMResult(
            content=choice.message.content or "",
            model=response.model,
            input_tokens=usage.prompt_tokens,
            output_tokens=usage.completion_tokens,
            finish_reason=choice.finish_reason,
        )

    except Exception as e:
        logger.error(f"LiteLLM completion failed for model {model}: {e}")
        raise LLMProviderError(provider=model, original_error=str(e))
