from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import api_router as api_v1_router
from app.core.config import settings
from app.core.database import close_db
from app.core.exceptions import (
    BaseAPIException,
    base_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logging import get_logger, setup_logging
from app.core.middlewares import LoggingMiddleware
from app.core.migration import run_migrations_on_startup
from app.core.schemas import APIResponse

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting {settings.app_name} ({settings.app_env}) | "
        f"result size {settings.recommendation_result_size}, "
        f"similarity tier {settings.similarity_llm_tier} "
        f"({settings.similarity_timeout_seconds}s timeout, "
        f"{settings.similarity_max_concurrency} concurrent), "
        f"langfuse {'on' if settings.langfuse_enabled else 'off'}"
    )
    run_migrations_on_startup(auto_migrate=settings.auto_migrate)

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db()


def create_app() -> FastAPI:
    """Build the recommendation API

    Routers live under ``/api/v1``; ``/health`` stays unversioned and
    unauthenticated for the load balancer.
    """
    app = FastAPI(
        title=settings.app_name,
        description="News recommendation scoring, feedback analytics and insights",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    # last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "PUT", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(BaseAPIException, base_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get(
        "/health", tags=["Health"], response_model=APIResponse[dict[str, Any]]
    )
    async def health_check():
        return APIResponse(
            success=True,
            message="OK",
            data={
                "status": "healthy",
                "app_name": settings.app_name,
                "environment": settings.app_env,
            },
        )

    return app


app = create_app()
