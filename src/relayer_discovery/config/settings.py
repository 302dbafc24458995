"""
Configuration management for the relayer discovery service.

Settings are read once at startup from the environment (and an optional
``.env`` file), validated against fixed bounds, and frozen. Every component
downstream receives an already-validated ``DiscoverySettings`` instance or
plain values taken from it.
"""

import sys
from enum import Enum
from urllib.parse import quote

import structlog
from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging output formats."""

    JSON = "json"
    CONSOLE = "console"


class RedisSettings(BaseSettings):
    """Redis configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REDIS_", env_file=".env", extra="ignore", frozen=True
    )

    host: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    db: int = Field(default=0, ge=0)
    password: SecretStr | None = None

    # Connection pool settings
    max_connections: int = Field(default=20, ge=1)
    socket_timeout: float = Field(default=2.0, gt=0)

    @property
    def url(self) -> str:
        """Redis connection URL."""
        if self.password is None:
            return f"redis://{self.host}:{self.port}/{self.db}"
        password = quote(self.password.get_secret_value(), safe="")
        return f"redis://:{password}@{self.host}:{self.port}/{self.db}"


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore", frozen=True
    )

    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.JSON


class DiscoverySettings(BaseSettings):
    """Main service settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    service_name: str = "relayer-discovery"

    # Relayer pool
    relayer_count: int = Field(default=3, ge=1, le=10)
    relayer_port: int = Field(default=3000, ge=1, le=65535)
    relayer_dns_suffix: str | None = None
    relayer_api_key: SecretStr | None = None

    # Probing cadence
    health_check_interval_ms: int = Field(default=10000, ge=1000, le=60000)
    health_check_timeout_ms: int = Field(default=500, ge=100, le=5000)

    # Shared membership set
    active_set_key: str = Field(default="relayer:active", min_length=1)
    use_redis: bool = True

    # Server settings
    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)

    # Component settings
    redis: RedisSettings = Field(default_factory=RedisSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @field_validator("relayer_dns_suffix", mode="before")
    @classmethod
    def normalize_dns_suffix(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip().strip(".")
        if not v:
            return None
        return f".{v}"

    @property
    def health_check_interval_seconds(self) -> float:
        """Round cadence in seconds."""
        return self.health_check_interval_ms / 1000

    @property
    def health_check_timeout_seconds(self) -> float:
        """Per-probe timeout in seconds."""
        return self.health_check_timeout_ms / 1000


def get_settings() -> DiscoverySettings:
    """Build settings from the environment."""
    return DiscoverySettings()


def load_settings_or_exit() -> DiscoverySettings:
    """Build settings or exit the process when any value is out of range."""
    try:
        return get_settings()
    except ValidationError as e:
        logger.error("Configuration validation failed", error_count=e.error_count())
        for error in e.errors():
            logger.error(
                "Configuration error",
                field=".".join(str(part) for part in error["loc"]),
                error=error["msg"],
            )
        sys.exit(1)
