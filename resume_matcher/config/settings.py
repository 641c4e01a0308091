"""Configuration settings for Resume Matcher."""

from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DriftPolicy(str, Enum):
    """What to do when a suggestion no longer matches the live resume."""

    REJECT = "reject"
    OVERWRITE = "overwrite"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory for local state (cache, history)",
    )
    local_cache_path: Path = Field(
        default=Path("./data/local_cache.json"),
        description="JSON file backing the local key-value cache",
    )
    output_dir: Path = Field(
        default=Path("./artifacts"),
        description="Directory for exported resumes",
    )

    # Remote store (client side)
    remote_url: str | None = Field(
        default=None,
        description="Base URL of the remote resume store; unset means local-only",
    )
    remote_session_cookie: str | None = Field(
        default=None,
        description="Session cookie value sent to the remote store",
    )
    remote_timeout: Annotated[float, Field(gt=0)] = Field(
        default=10.0,
        description="Timeout in seconds for remote store requests",
    )

    # Synchronizer timing
    sync_debounce_seconds: Annotated[float, Field(ge=0)] = Field(
        default=1.0,
        description="Quiescence window before a remote push is sent",
    )
    sync_synced_display_seconds: Annotated[float, Field(ge=0)] = Field(
        default=2.0,
        description="How long the 'synced' status is shown before reverting to idle",
    )
    sync_error_display_seconds: Annotated[float, Field(ge=0)] = Field(
        default=3.0,
        description="How long the 'error' status is shown before reverting to idle",
    )

    # Suggestions
    suggestion_drift_policy: DriftPolicy = Field(
        default=DriftPolicy.REJECT,
        description="'reject' refuses to overwrite hand-edited fields, 'overwrite' does not check",
    )

    # Job history
    job_history_limit: Annotated[int, Field(gt=0)] = Field(
        default=10,
        description="Maximum number of job history entries kept",
    )

    # Remote store (server side)
    server_db_path: Path = Field(
        default=Path("./data/resumes.db"),
        description="Path to the SQLite database used by the resume store service",
    )
    session_secret: str = Field(
        default="dev-secret-change-me-in-production",
        description="Secret used to sign session cookies",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )

    @field_validator("suggestion_drift_policy", mode="before")
    @classmethod
    def validate_drift_policy(cls, v: str | DriftPolicy) -> DriftPolicy:
        """Convert string policy to DriftPolicy enum."""
        if isinstance(v, DriftPolicy):
            return v
        if isinstance(v, str):
            value = v.lower().strip()
            try:
                return DriftPolicy(value)
            except ValueError:
                raise ValueError(
                    f"Invalid drift policy: {v}. Must be 'reject' or 'overwrite'"
                ) from None
        raise ValueError(f"Invalid drift policy type: {type(v)}")

    @field_validator("remote_url", mode="before")
    @classmethod
    def normalize_remote_url(cls, v: str | None) -> str | None:
        """Treat blank URLs as unset and drop trailing slashes."""
        if v is None:
            return None
        value = str(v).strip()
        if not value:
            return None
        return value.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


# Singleton instance for easy import
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
