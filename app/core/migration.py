"""Alembic migrations on startup

Checks the database revision against the script head when the server starts
and upgrades when ``auto_migrate`` is enabled.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def get_sync_database_url() -> str:
    """Alembic runs on a sync driver; swap asyncpg for psycopg2"""
    return settings.database_url.replace("+asyncpg", "+psycopg2")


def get_alembic_config() -> Config:
    project_root = Path(__file__).resolve().parents[2]

    config = Config(str(project_root / "alembic.ini"))
    config.set_main_option("script_location", str(project_root / "migrations"))
    config.set_main_option("sqlalchemy.url", get_sync_database_url())
    return config


def get_current_revision() -> str | None:
    try:
        engine = create_engine(get_sync_database_url())
        with engine.connect() as conn:
            rev = MigrationContext.configure(conn).get_current_revision()
            return str(rev) if rev else None
    except Exception as e:
        logger.warning(f"Could not read current migration revision: {e}")
        return None


def get_head_revision() -> str | None:
    script = ScriptDirectory.from_config(get_alembic_config())
    head = script.get_current_head()
    return str(head) if head else None


def check_migration_status() -> dict:
    """Compare the database revision with the script head

    Returns:
        dict: ``current``, ``head`` and ``is_up_to_date``
    """
    current = get_current_revision()
    head = get_head_revision()
    return {
        "current": current,
        "head": head,
        "is_up_to_date": current == head,
    }


def run_migrations() -> bool:
    """Upgrade to head

    Returns:
        bool: True on success
    """
    try:
        config = get_alembic_config()
        status = check_migration_status()

        if status["is_up_to_date"]:
            logger.info(f"Migrations up to date (revision: {status['current']})")
            return True

        logger.info(
            f"Upgrading migrations ({status['current']} -> {status['head']})"
        )
        command.upgrade(config, "head")
        logger.info(f"Migrations applied (revision: {status['head']})")
        return True

    except Exception as e:
        logger.error(f"Migration failed: {e}")
        return False


def run_migrations_on_startup(auto_migrate: bool = True) -> None:
    """Check migration status at startup and optionally upgrade

    Args:
        auto_migrate: upgrade when behind; otherwise only report

    Raises:
        RuntimeError: status check failed in production
    """
    try:
        status = check_migration_status()

        if status["current"] is None:
            logger.warning("No migration history found; initial migration required.")
            if auto_migrate:
                run_migrations()
            return

        if not status["is_up_to_date"]:
            logger.warning(
                f"Migrations behind (current: {status['current']}, "
                f"head: {status['head']})"
            )
            if auto_migrate:
                run_migrations()
        else:
            logger.info(f"Migrations up to date (revision: {status['current']})")

    except Exception as e:
        logger.error(f"Migration status check failed: {e}")
        if settings.is_production:
            raise RuntimeError("Migration status check failed in production") from e
        logger.warning("Continuing startup outside production.")
