"""Database engine, session factory and declarative base."""

import logging
import os
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ezdocs.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record):
    """Enable foreign keys and replace the ASCII-only built-in lower()."""
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return

    db_dir = os.path.dirname(os.path.abspath(url.database))
    if not os.path.isdir(db_dir):
        os.makedirs(db_dir, exist_ok=True)
        logger.info(f"Created database directory: {db_dir}")


class Database:
    """Owns the engine and hands out sessions.

    One instance is created per application and stored on ``app.state``;
    services receive sessions from it and never build engines themselves.
    """

    def __init__(self, url: Optional[str] = None, engine: Optional[Engine] = None, echo: bool = False):
        if engine is None:
            url = url or settings.DATABASE_URL
            engine_kwargs = {"echo": echo, "pool_pre_ping": True}
            if make_url(url).get_backend_name() == "sqlite":
                engine_kwargs["connect_args"] = {"check_same_thread": False}
            else:
                engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
                engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
            engine = create_engine(url, **engine_kwargs)

        self.engine = engine
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _configure_sqlite_connection)

        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @property
    def url(self) -> str:
        return self.engine.url.render_as_string(hide_password=False)

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create all tables directly from the ORM metadata."""
        # Importing the models registers them on Base.metadata
        import ezdocs.models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def has_table(self, table_name: str) -> bool:
        return inspect(self.engine).has_table(table_name)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session bound to the app's database."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
