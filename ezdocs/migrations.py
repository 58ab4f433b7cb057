"""Startup database preparation: directory, migrations, connection check."""

import logging
import os

from sqlalchemy import text

from ezdocs.database import Database, ensure_sqlite_directory

logger = logging.getLogger(__name__)

ALEMBIC_INI = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "alembic.ini")

# Tables created by the initial migration
SCHEMA_TABLES = ("documents", "persons", "document_authors")


def run_migrations(database: Database) -> None:
    """Run ``alembic upgrade head`` against the given database."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(ALEMBIC_INI)
    alembic_cfg.attributes["configure_logger"] = False
    # configparser treats % as interpolation
    alembic_cfg.set_main_option("sqlalchemy.url", database.url.replace("%", "%%"))
    command.upgrade(alembic_cfg, "head")


def prepare_database(database: Database, migrate: bool = True) -> bool:
    """
    Make the database ready to serve requests.

    Args:
        database: Application database
        migrate: Apply Alembic migrations when the schema is missing

    Returns:
        True if the connection check succeeded after preparation
    """
    ensure_sqlite_directory(database.url)

    if migrate:
        try:
            if all(database.has_table(name) for name in SCHEMA_TABLES):
                logger.info("Database tables already exist, skipping migrations")
            elif os.path.exists(ALEMBIC_INI):
                logger.info("Running database migrations...")
                run_migrations(database)
                logger.info("Database migrations completed successfully")
            else:
                logger.warning(f"{ALEMBIC_INI} not found, creating tables from ORM metadata")
                database.create_all()
        except Exception as e:
            logger.error(f"Startup database check/migration error: {e}")
            logger.info("Continuing startup - assuming database is ready")

    try:
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info(f"Database connection test succeeded ({database.dialect})")
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        return False
