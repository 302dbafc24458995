"""Configuration for the relayer discovery service."""

from .settings import (
    DiscoverySettings,
    LogFormat,
    LogLevel,
    ObservabilitySettings,
    RedisSettings,
    get_settings,
    load_settings_or_exit,
)

__all__ = [
    "DiscoverySettings",
    "LogFormat",
    "LogLevel",
    "ObservabilitySettings",
    "RedisSettings",
    "get_settings",
    "load_settings_or_exit",
]
