"""
Configuration Settings.

This module defines the runtime configuration using Pydantic's BaseSettings.
All values are read from ``AGENT_RUNTIME_*`` environment variables and the
``.env`` file without explicit dotenv loading.
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings model.

    All properties are bound from environment variables and the .env file.
    Model and provider are deliberately absent: they belong to the per-agent
    ``GeneralAgentConfig`` and are never defaulted here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="AGENT_RUNTIME_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="AGENT_RUNTIME_LOG_FORMAT",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to a file under log_file_dir",
        alias="AGENT_RUNTIME_ENABLE_FILE_LOGGING",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="AGENT_RUNTIME_LOG_FILE_DIR",
    )

    # =====================================================================
    # Accounting Configuration
    # =====================================================================
    cost_currency: str = Field(
        default="USD",
        description="Currency unit recorded on cost entries",
        alias="AGENT_RUNTIME_COST_CURRENCY",
    )

    # =====================================================================
    # Step Loop Configuration
    # =====================================================================
    max_steps: int = Field(
        default=100,
        ge=1,
        description="Dispatch steps allowed per run unless the state sets its own limit",
        alias="AGENT_RUNTIME_MAX_STEPS",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
