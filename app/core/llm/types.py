"""Shared LLM types"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.core.exceptions import ErrorCode, InternalServerException


class LLMTier(str, Enum):
    """Model tier, chosen by task complexity

    Attributes:
        LIGHT: short classification-style prompts (similarity scoring)
        STANDARD: longer structured generation
    """

    LIGHT = "light"
    STANDARD = "standard"


class LLMMessage(BaseModel):
    """Chat message

    Attributes:
        role: ``system``, ``user`` or ``assistant``
        content: message text
    """

    role: str
    content: str


class LLMResult(BaseModel):
    """Completion result

    Attributes:
        content: generated text
        model: model that produced it
        input_tokens: prompt token count
        output_tokens: completion token count
        finish_reason: provider finish reason, if any
    """

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: Optional[str] = None


class LLMProviderError(InternalServerException):
    """A single model call failed; the fallback loop moves to the next model"""

    def __init__(self, provider: str, original_error: str):
        super().__init__(
            message=f"LLM provider '{provider}' failed: {original_error}",
            error_code=ErrorCode.LLM_PROVIDER_ERROR,
            detail={"provider": provider, "error": original_error},
        )


class AllProvidersFailedError(InternalServerException):
    """Every model configured for a tier failed

    Example:
        attempted = ["gpt-4o-mini", "anthropic/claude-3-5-haiku-latest"]
        raise AllProvidersFailedError(tier="light", attempts=attempted)
    """

    def __init__(self, tier: str, attempts: list[str]):
        super().__init__(
            message=f"All providers failed for tier '{tier}'",
            error_code=ErrorCode.ALL_PROVIDERS_FAILED,
            detail={"tier": tier, "attempted_models": attempts},
        )
