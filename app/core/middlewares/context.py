"""Request id context

The id is bound per request by ``LoggingMiddleware`` and read by services and
the log filter.
"""

import contextvars
import logging
import uuid
from typing import Optional

request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind a request id to the current context, generating one if missing"""
    if request_id is None:
        request_id = generate_request_id()
    request_id_ctx.set(request_id)
    return request_id


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestIdFilter(logging.Filter):
    """Stamps ``record.request_id`` from the context ("-" outside requests)

    An explicit ``extra={"request_id": ...}`` wins.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id() or "-"
        return True
