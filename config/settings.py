"""Global configuration management using pydantic-settings.

Only ambient concerns (logging and request timeout) are configurable.
The crawl target and the User-Agent header are fixed constants: the
crawler is bound to one source site and must run with no environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Listing pages are addressed as TARGET_URL + relative href (no joining).
TARGET_URL = "https://movie.douban.com/top250"

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.55 Safari/537.36"
)


class GlobalConfig(BaseSettings):
    """Centralized configuration with environment variable binding.

    Every field has a default, so the application starts with an empty
    environment. Overrides use the ``TOP250_`` prefix.

    Attributes:
        app_name: Application identifier for logging.
        environment: Deployment environment (development/staging/production).
        debug: Enable verbose tracebacks in console logs.
        log_level: Minimum log level for output filtering.
        log_dir: Directory for structured JSON log files, or None for
            console-only logging.
        log_rotation: Log file rotation interval.
        log_retention: Log file retention period.
        request_timeout_ms: Per-request timeout in milliseconds (0 = none).
    """

    model_config = SettingsConfigDict(
        env_prefix="TOP250_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    app_name: str = Field(default="Top250-Crawler", description="Application identifier")
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    log_dir: Path | None = Field(
        default=None, description="JSON log directory; unset disables the file sink"
    )
    log_rotation: str = Field(default="1 week", description="Log rotation interval")
    log_retention: str = Field(default="1 month", description="Log retention period")

    # Network
    request_timeout_ms: int = Field(
        default=30000, ge=0, le=120000, description="Request timeout in milliseconds"
    )

    @field_validator("log_dir", mode="before")
    @classmethod
    def ensure_path(cls, value: str | Path | None) -> Path | None:
        """Convert string paths to Path objects; a blank value means no file sink."""
        if isinstance(value, str):
            return Path(value) if value.strip() else None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        """Accept lower-case level names from the environment."""
        return value.upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_config() -> GlobalConfig:
    """Retrieve the singleton GlobalConfig instance.

    Returns:
        GlobalConfig: The validated configuration instance.
    """
    return GlobalConfig()
