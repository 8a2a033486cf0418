"""
Settings module for the Kinerja backend.

Environment-based configuration with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults target local development against a SQLite file.
    """

    # Environment
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./kinerja.db",
        description="SQLAlchemy database URL"
    )

    # Import behaviour
    legacy_score_remap: bool = Field(
        default=False,
        description="Remap numeric scores from the legacy form export (10->65, >75->85)"
    )
    performance_org_level_column: int = Field(
        default=3,
        ge=0,
        description="Column index of the free-text organisational level in performance rows"
    )
    max_import_lines: int = Field(
        default=5000,
        gt=0,
        description="Maximum number of lines accepted in one import body"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=7071,
        description="API server port"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are cached for performance. To reload, use:
        get_settings.cache_clear()

    Returns:
        Settings instance
    """
    return Settings()


ENV_FILE_VARIABLE = "KINERJA_ENV_FILE"


def load_settings_from_env(env_file: Optional[str] = None) -> Settings:
    """
    Export an alternate env file and rebuild the cached settings.

    The file defaults to $KINERJA_ENV_FILE, then ".env". Variables that
    are already set in the process environment are not overwritten.

    Returns:
        The refreshed Settings instance
    """
    env_file = env_file or os.environ.get(ENV_FILE_VARIABLE, ".env")
    if os.path.isfile(env_file):
        load_dotenv(env_file, override=False)
    get_settings.cache_clear()
    return get_settings()
