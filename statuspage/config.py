"""Application configuration management via pydantic-settings.

Centralize all process-level configuration for the status page service. Load
settings from environment variables and/or a `.env` file. The list of
monitored services lives in a separate JSON document whose location is
`CONFIG_PATH`; see `statuspage.services`.
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration settings.

    Attributes:
        PROJECT_NAME: Display name for the application.
        VERSION: Build version string reported by `/version`.
        ENVIRONMENT: Deployment environment identifier.
        LOG_LEVEL: Minimum logging verbosity level.
        LOGGING_NOISY_MODULES: Loggers capped at WARNING.
        HOST: Interface the HTTP server binds to.
        PORT: TCP port the HTTP server listens on.
        CONFIG_PATH: Path to the JSON service list.
        STATIC_DIR: Directory of static assets served at `/`.
        CHECK_TIMEOUT: Client-side timeout for one service probe, in seconds.
        SHUTDOWN_TIMEOUT: Upper bound on the graceful drain, in seconds.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ==========================================================================
    # PROJECT METADATA
    # ==========================================================================
    PROJECT_NAME: str = "Status Page"
    VERSION: str = "3.0.0"

    # ==========================================================================
    # ENVIRONMENT & LOGGING
    # ==========================================================================
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["debug", "info", "warning", "error", "critical"] = "info"
    LOGGING_NOISY_MODULES: list[str] = [
        "uvicorn.access",
        "httpx",
        "httpcore",
        "asyncio",
    ]

    # ==========================================================================
    # HTTP SERVER
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8088
    STATIC_DIR: str = "./html"
    SHUTDOWN_TIMEOUT: float = 10.0

    # ==========================================================================
    # SERVICE CHECKS
    # ==========================================================================
    CONFIG_PATH: str = "./config.json"
    CHECK_TIMEOUT: float = 3.0

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Reject ports outside the valid TCP range.

        Raises:
            ValueError: If the port is not within 1-65535.
        """
        if not 1 <= v <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {v}")
        return v

    @field_validator("CHECK_TIMEOUT", "SHUTDOWN_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton instance of the application settings.

    Returns:
        The singleton Settings instance.
    """
    return Settings()
