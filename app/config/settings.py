import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    ⚠️ WARNING: SQLite is meant for local development only.
    Set DATABASE_URL to a PostgreSQL connection string for shared deployments.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "maintenance.db"
    abs_path = db_path.resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.warning(f"⚠️ Using SQLite database (LOCAL DEV ONLY): {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    schedule_timezone: str = Field(
        default="UTC",
        validation_alias="SCHEDULE_TIMEZONE",
        description="IANA time zone used to derive 'today' for projections",
    )
    projection_horizon_months: int = Field(
        default=3,
        validation_alias="PROJECTION_HORIZON_MONTHS",
        description="How many months ahead the calendar projects plan occurrences",
    )
    auto_generate_enabled: bool = Field(
        default=False,
        validation_alias="AUTO_GENERATE_ENABLED",
        description="Run generate_scheduled_orders periodically in the background",
    )
    auto_generate_interval_hours: int = Field(
        default=24,
        validation_alias="AUTO_GENERATE_INTERVAL_HOURS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("schedule_timezone")
    @classmethod
    def validate_schedule_timezone(cls, value: str) -> str:
        """Fall back to UTC when the configured zone is unknown."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown SCHEDULE_TIMEZONE '{value}'. Defaulting to UTC.")
            return "UTC"
        return value

    @field_validator("projection_horizon_months")
    @classmethod
    def validate_horizon(cls, value: int) -> int:
        if value < 1:
            logger.warning(f"PROJECTION_HORIZON_MONTHS must be >= 1, got {value}. Defaulting to 3.")
            return 3
        return value


settings = Settings()
