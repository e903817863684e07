"""Test configuration"""

import itertools
import os
from datetime import datetime
from typing import Generator, Optional
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from docker import from_env
from docker.errors import DockerException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from app.core.config import settings
from app.core.database import Base, get_db
from app.core.llm.types import LLMResult
from app.core.utils.datetime import UTC, now_utc
from app.domains.articles.models import ArticlePriority, ArticleStatus
from app.domains.articles.schemas import (
    ArticleAnalytics,
    ArticleCategory,
    ContentItem,
)
from app.domains.preferences.schemas import BehaviorRecord, UserPreferenceProfile
from app.main import app


def _is_docker_available() -> bool:
    """Whether a local Docker daemon is reachable"""
    if os.getenv("FORCE_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return True
    if os.getenv("SKIP_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return False

    try:
        client = from_env()
        client.ping()
        return True
    except DockerException:
        return False
    except Exception:
        return False


DOCKER_AVAILABLE = _is_docker_available()


@pytest.fixture(scope="session")
def user_id_factory():
    """
    Unique user IDs per test.
    Seeded from the current UTC timestamp (ms)
    """
    start = int(now_utc().timestamp() * 1000) % 2_000_000_000
    counter = itertools.count(start=start)

    def _factory(n: int = 1):
        if n == 1:
            return f"user_{next(counter)}"
        return [f"user_{next(counter)}" for _ in range(n)]

    return _factory


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """PostgreSQL test container"""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available; skipping container-based tests.")

    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def test_database_url(postgres_container: PostgresContainer) -> str:
    """Test database URL"""
    # asyncpg driver
    return str(
        postgres_container.get_connection_url().replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://"
        )
    )


@pytest_asyncio.fixture
async def db_session(test_database_url: str):
    """Test database session"""
    engine = create_async_engine(test_database_url, echo=False)

    # fresh schema per test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()


# NOTE:
# pytest-asyncio creates an event loop per test, so session-scoped async
# fixtures raise ScopeMismatch. Keep every async fixture function-scoped.
@pytest_asyncio.fixture
async def client(db_session):
    """Async test client bound to the test database"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def api_key_header():
    """Internal API key header"""
    return {"X-Internal-Api-Key": settings.internal_api_key}


def pytest_configure(config):
    """Register pytest markers"""
    config.addinivalue_line("markers", "real_ai: tests that call a real LLM provider (paid)")
    config.addinivalue_line("markers", "mock_ai: tests that use the mocked LLM (free)")


def is_real_ai_enabled() -> bool:
    return os.getenv("ENABLE_REAL_AI_TESTS", "false").lower() == "true"


@pytest.fixture
def skip_if_no_real_ai():
    """Skip unless real LLM tests are enabled"""
    if not is_real_ai_enabled():
        pytest.skip("Set ENABLE_REAL_AI_TESTS=true")


@pytest.fixture(autouse=True)
def mock_llm_completion():
    """Mock LLM completion - applied automatically"""
    mock = AsyncMock()

    async def default_side_effect(*args, **kwargs):
        return LLMResult(
            content="0.5",
            model="mock-model",
            input_tokens=100,
            output_tokens=1,
            finish_reason="stop",
        )

    mock.side_effect = default_side_effect

    # every path call_with_fallback is reachable through
    with patch("app.core.llm.fallback.call_with_fallback", mock), patch(
        "app.core.llm.call_with_fallback", mock
    ), patch(
        "app.domains.recommendations.similarity.call_with_fallback", mock
    ):
        yield mock


# ---------------------------------------------------------------------------
# Domain factories
# ---------------------------------------------------------------------------


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time for recency and analytics windows"""
    return datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


@pytest.fixture
def make_item(fixed_now):
    """ContentItem factory with neutral defaults"""

    def _factory(
        item_id: str = "article-1",
        category: Optional[str] = "Technology",
        content_words: int = 1000,
        **overrides,
    ) -> ContentItem:
        values = {
            "id": item_id,
            "title": f"Title {item_id}",
            "excerpt": f"Excerpt {item_id}",
            "content": " ".join(["word"] * content_words),
            "category": ArticleCategory(name=category) if category else None,
            "status": ArticleStatus.PUBLISHED,
            "priority": ArticlePriority.NORMAL,
            "created_at": fixed_now,
        }
        values.update(overrides)
        return ContentItem(**values)

    return _factory


@pytest.fixture
def viral_analytics() -> ArticleAnalytics:
    return ArticleAnalytics(
        views=12000,
        likes=1500,
        shares=600,
        comments=40,
        average_read_time=180,
        click_through_rate=1.0,
    )


@pytest.fixture
def profile() -> UserPreferenceProfile:
    return UserPreferenceProfile(
        user_id="reader-1",
        preferred_categories=["Sports"],
        reading_time="medium",
        language="ar",
        time_of_day="evening",
    )


@pytest.fixture
def behavior() -> BehaviorRecord:
    return BehaviorRecord.empty("reader-1")
