"""Langfuse tracing for LLM calls

Enabled only when ``settings.langfuse_enabled`` is true.
"""

import os
from typing import Optional

import litellm
from langfuse import Langfuse
from langfuse.decorators import observe

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def initialize_langfuse() -> Optional[Langfuse]:
    """Create the Langfuse client and register the LiteLLM callback

    Returns:
        Langfuse client, or None when disabled or initialization fails
    """
    if not settings.langfuse_enabled:
        return None

    try:
        os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
        os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
        os.environ["LANGFUSE_HOST"] = settings.langfuse_host

        litellm.success_callback = ["langfuse"]

        client = Langfuse(
            secret_key=settings.langfuse_secret_key,
            public_key=settings.langfuse_public_key,
            host=settings.langfuse_host,
        )
        logger.info("LangFuse initialized successfully")
        return client

    except Exception as e:
        logger.warning(
            f"LangFuse initialization failed: {e}. "
            "Continuing without observability."
        )
        return None


langfuse_client = initialize_langfuse()


def _noop_observe(*args, **kwargs):
    def decorator(func):
        return func

    return decorator


def get_observe_decorator():
    """Return Langfuse's ``observe`` or a no-op stand-in when tracing is off

    Example:
        observe = get_observe_decorator()

        @observe(name="similarity_classify")
        async def classify(self, current, candidate):
            ...
    """
    if langfuse_client:
        return observe
    return _noop_observe
