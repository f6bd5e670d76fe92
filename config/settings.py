"""Application settings using Pydantic."""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///shipmatch.db",
        description="SQLAlchemy database URL",
    )

    # Slack
    slack_webhook_url: Optional[str] = Field(
        default=None,
        description="Slack webhook URL for alert notifications",
    )

    # Matching
    min_match_score: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Drop alert matches scoring below this value",
    )
    notify_min_score: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Minimum score for a match to be included in a notification",
    )
    alert_match_limit: int = Field(
        default=20,
        ge=1,
        description="Maximum number of matches returned for one alert",
    )

    # Alerts
    max_active_alerts: int = Field(
        default=5,
        ge=1,
        description="Active alerts allowed per user",
    )
    alert_check_interval_minutes: int = Field(
        default=15,
        description="How often to scan alerts for new matches (minutes)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: Optional[str] = Field(
        default="logs/shipmatch.log",
        description="Rotating log file path (empty to disable)",
    )
    log_sql: bool = Field(default=False, description="Log SQL statements issued by the matchers")

    # Paths
    config_dir: Path = Field(
        default=Path(__file__).parent,
        description="Configuration directory",
    )

    @property
    def project_root(self) -> Path:
        """Project root directory."""
        return self.config_dir.parent


# Global settings instance
settings = Settings()
