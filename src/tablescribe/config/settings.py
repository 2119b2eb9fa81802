"""
Configuration management for tablescribe.

This module provides environment-based configuration using Pydantic BaseSettings,
so that the same code can bind tables to a development, test, or production
store without code changes.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

logger = structlog.get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _resolve_env_file() -> Path:
    """Locate the .env file; TABLESCRIBE_ENV_FILE overrides the project default."""
    override = os.getenv("TABLESCRIBE_ENV_FILE")
    if not override:
        return PROJECT_ROOT / ".env"
    path = Path(override).expanduser()
    return path if path.is_absolute() else PROJECT_ROOT / path


SETTINGS_ENV_FILE = _resolve_env_file()


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are loaded with the TABLESCRIBE_ prefix, so
    TABLESCRIBE_TABLE_PREFIX overrides ``table_prefix``. The uppercase fields
    (DATABASE_URL, LOG_LEVEL) are read without the prefix.
    """

    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "DATABASE_URL", "TABLESCRIBE_DATABASE__URI", "TABLESCRIBE_DATABASE_URI"
        ),
        description="SQLAlchemy database URL",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    table_prefix: str = Field(
        default="", description="Prefix prepended to every table name"
    )
    database_name: Optional[str] = Field(
        default=None,
        description="Schema name used for metadata lookups (defaults to the URL database)",
    )

    # Engine settings
    pool_size: int = Field(default=5, description="Database connection pool size")
    pool_pre_ping: bool = Field(
        default=True, description="Test connections for liveness before use"
    )
    echo_sql: bool = Field(default=False, description="Echo SQL from the engine")

    @model_validator(mode="after")
    def normalize_database_url(self) -> "Settings":
        """Route bare ``mysql://`` URLs through the PyMySQL driver."""
        if self.DATABASE_URL and self.DATABASE_URL.startswith("mysql://"):
            self.DATABASE_URL = self.DATABASE_URL.replace(
                "mysql://", "mysql+pymysql://", 1
            )
        return self

    def get_database_name(self) -> str:
        """
        Get the schema name used for INFORMATION_SCHEMA lookups.

        Priority order:
        1) TABLESCRIBE_DATABASE_NAME
        2) Database component of DATABASE_URL

        Returns:
            The schema name, or an empty string when neither is configured
        """
        if self.database_name:
            return self.database_name
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL).database or ""
        return ""

    model_config = SettingsConfigDict(
        env_prefix="TABLESCRIBE_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    settings = Settings()
    logger.debug(
        "configuration.loaded",
        table_prefix=settings.table_prefix,
        database_configured=settings.DATABASE_URL is not None,
    )
    return settings
