"""
Configuration for the Task List API.

Settings come from environment variables (or a local .env file) with
defaults suitable for running next to a local Redis.
"""

from enum import Enum
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

load_dotenv()


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings with environment-specific defaults.

    Environment variables override defaults, e.g. ``REDIS_ADDR`` or ``PORT``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )

    # API Configuration
    api_title: str = Field(default="Task List API", description="API title for OpenAPI docs")
    api_version: str = Field(default="1.0.0", description="API version")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8081, ge=1, le=65535, description="Server port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    # Cache Configuration
    redis_addr: str = Field(
        default="localhost:6379",
        description="Redis address as host:port",
    )
    redis_db: int = Field(default=0, ge=0, description="Redis database index")
    redis_password: str | None = Field(default=None, description="Redis password")
    cache_key: str = Field(default="tasks", description="Key holding the task list snapshot")
    cache_ttl_seconds: int = Field(
        default=600,
        ge=1,
        description="Expiry of the cached task list snapshot in seconds",
    )
    cache_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        le=60,
        description="Upper bound for a single Redis round-trip in seconds",
    )

    @field_validator("redis_addr")
    @classmethod
    def validate_redis_addr(cls, v: str) -> str:
        """Fall back to the local default when the address is blank."""
        v = v.strip()
        return v or "localhost:6379"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def redis_url(self) -> str:
        """Connection URL built from address, password and database index."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_addr}/{self.redis_db}"

    def get_environment_display(self) -> str:
        """Get human-readable environment name."""
        return self.environment.value.title()

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    def get_server_config(self) -> dict[str, Any]:
        """Keyword arguments for uvicorn.run."""
        return {
            "host": self.host,
            "port": self.port,
            "log_config": None,  # Use our structured logging
        }


# Global settings instance
settings = Settings()


def configure_structlog() -> None:
    """Initialize structlog with clean, readable logging."""
    import logging
    import sys

    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        force=True,
        format="%(message)s",
    )
    logging.root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=not settings.is_production()),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
