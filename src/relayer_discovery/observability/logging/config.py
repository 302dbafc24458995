"""Logging configuration and setup."""

import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory

from relayer_discovery.config.settings import LogFormat, LogLevel

from .correlation import CorrelationIDProcessor
from .formatters import ConsoleFormatter, JSONFormatter


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    format_type: LogFormat = LogFormat.JSON,
    enable_correlation: bool = True,
    enable_colors: bool = True,
) -> None:
    """Setup structured logging configuration."""

    # Configure standard library logging
    logging.basicConfig(
        level=getattr(logging, level.value),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if enable_correlation:
        processors.append(CorrelationIDProcessor())

    processors.append(structlog.processors.TimeStamper(fmt="ISO", utc=True))

    if format_type == LogFormat.JSON:
        processors.append(JSONFormatter())
    else:
        processors.append(ConsoleFormatter(colors=enable_colors))

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
