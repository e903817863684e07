"""Request/response logging middleware"""

from typing import Callable, cast

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger
from app.core.middlewares.context import set_request_id
from app.core.utils.time import measure_time

logger = get_logger(__name__)

EXCLUDE_PATHS = {"/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds the request id and logs every request with its latency

    The caller's ``X-Request-ID`` is reused when present. Responses carry
    ``X-Request-ID`` and ``X-Process-Time`` (milliseconds). Health checks and
    docs are passed through untouched.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        if request.url.path in EXCLUDE_PATHS:
            return cast(Response, await call_next(request))

        request_id = set_request_id(request.headers.get("X-Request-ID"))
        route = f"{request.method} {request.url.path}"
        client = request.client.host if request.client else "unknown"

        logger.info(f"-> {route} from {client}")

        with measure_time() as timer:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(f"x {route} failed: {e}")
                raise

        elapsed_ms = timer["elapsed_ms"]
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}ms"

        if response.status_code < 400:
            logger.info(f"<- {route} {response.status_code} in {elapsed_ms:.2f}ms")
        else:
            logger.warning(f"x {route} {response.status_code} in {elapsed_ms:.2f}ms")

        return cast(Response, response)
