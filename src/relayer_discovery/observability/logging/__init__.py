"""Structured logging configuration and utilities."""

from .config import get_logger, setup_logging
from .correlation import (
    CorrelationContext,
    CorrelationIDProcessor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "get_logger",
    "JSONFormatter",
    "ConsoleFormatter",
    "CorrelationContext",
    "CorrelationIDProcessor",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
