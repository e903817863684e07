"""Public LLM interface for the domains"""

from app.core.llm.fallback import call_with_fallback, get_models_for_tier
from app.core.llm.observability import get_observe_decorator
from app.core.llm.types import (
    AllProvidersFailedError,
    LLMMessage,
    LLMProviderError,
    LLMResult,
    LLMTier,
)

__all__ = [
    # Types
    "LLMTier",
    "LLMMessage",
    "LLMResult",
    "LLMProviderError",
    "AllProvidersFailedError",
    # Functions
    "call_with_fallback",
    "get_models_for_tier",
    # Decorators
    "get_observe_decorator",
]
