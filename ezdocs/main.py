"""FastAPI application entry point."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ezdocs.config import Settings, settings as default_settings
from ezdocs.database import Database
from ezdocs.errors import install_error_handlers
from ezdocs.middleware import SecurityHeadersMiddleware
from ezdocs.migrations import prepare_database
from ezdocs.routes import documents, health, persons

# Configure logging
logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the EzDocs application.

    Args:
        settings: Settings to use (defaults to the environment-loaded settings)
        database: Database to serve from (defaults to one built from DATABASE_URL)

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL, echo=settings.DB_ECHO)

    app = FastAPI(
        title="EzDocs",
        description="Documents and authors REST backend",
        version=settings.APP_VERSION,
    )
    app.state.settings = settings
    app.state.database = database

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(SecurityHeadersMiddleware)

    install_error_handlers(app, redact_internal=settings.is_production)

    # Include routers
    app.include_router(health.router)
    app.include_router(documents.router)
    app.include_router(persons.router)

    @app.on_event("startup")
    async def startup_event():
        """Prepare the database before serving requests."""
        logger.info(f"Starting application ({settings.APP_ENV}, {database.dialect})...")
        prepare_database(database, migrate=settings.RUN_MIGRATIONS)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down application...")
        database.dispose()

    return app


app = create_app()
