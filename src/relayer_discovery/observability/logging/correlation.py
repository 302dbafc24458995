"""Correlation ID management for log events."""

import contextvars
import uuid
from typing import Any

# Context variable for correlation ID
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


class CorrelationIDProcessor:
    """Processor to add correlation ID to log events."""

    def __init__(self, correlation_id_key: str = "correlation_id"):
        self.correlation_id_key = correlation_id_key

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        """Add correlation ID to log event."""
        correlation_id = get_correlation_id()
        if correlation_id and self.correlation_id_key not in event_dict:
            event_dict[self.correlation_id_key] = correlation_id
        return event_dict


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> contextvars.Token[str | None]:
    """Set correlation ID in context."""
    return correlation_id_var.set(correlation_id)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


class CorrelationContext:
    """Context manager for correlation ID."""

    def __init__(self, correlation_id: str | None = None):
        self.correlation_id = correlation_id or generate_correlation_id()
        self.token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> "CorrelationContext":
        """Enter context and set correlation ID."""
        self.token = correlation_id_var.set(self.correlation_id)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context and restore previous correlation ID."""
        if self.token:
            correlation_id_var.reset(self.token)
