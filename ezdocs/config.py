"""Application configuration using Pydantic Settings."""

import os
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_ENV = os.getenv("APP_ENV", "development")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    APP_ENV: str = "development"  # 'development', 'test', 'production'
    APP_VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite:///./storage/db/development.db"
    DB_POOL_SIZE: int = 5  # Ignored for SQLite
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False
    RUN_MIGRATIONS: bool = True

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # .env.<APP_ENV> overrides .env
    model_config = SettingsConfigDict(
        env_file=(".env", f".env.{APP_ENV}"),
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


# Global settings instance
settings = Settings()
