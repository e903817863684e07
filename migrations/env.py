"""Alembic environment"""

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.database import Base  # noqa: E402
from app.core.migration import get_sync_database_url  # noqa: E402

# import every model so autogenerate sees it
from app.domains.articles.models import Article  # noqa: F401, E402
from app.domains.feedback.models import (  # noqa: F401, E402
    RecommendationFeedback,
    RecommendationInsightRecord,
)
from app.domains.preferences.models import (  # noqa: F401, E402
    UserBehavior,
    UserPreference,
)
from app.domains.recommendations.models import (  # noqa: F401, E402
    EngineSettings,
    IssuedRecommendation,
)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

config.set_main_option("sqlalchemy.url", get_sync_database_url())


def run_migrations_offline() -> None:
    """Emit SQL without a database connection"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(
        config.get_main_option("sqlalchemy.url"),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
