"""Exception hierarchy for the relayer discovery service."""

from typing import Any

from .models import ErrorCode


class DiscoveryError(Exception):
    """Base exception for the discovery service."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class MembershipStoreError(DiscoveryError):
    """A membership store operation failed."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        error_code: ErrorCode = ErrorCode.STORE_ERROR,
    ):
        super().__init__(
            message, error_code, {"operation": operation} if operation else None
        )
        self.operation = operation


class StoreNotConnectedError(MembershipStoreError):
    """A store operation was issued before ``connect()``."""

    def __init__(self, operation: str | None = None):
        super().__init__(
            "Membership store not connected. Call connect() first.",
            operation,
            ErrorCode.STORE_NOT_CONNECTED,
        )


class StoreConnectionError(MembershipStoreError):
    """The store could not be reached."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, operation, ErrorCode.STORE_CONNECTION_ERROR)


class NoActiveRelayerError(DiscoveryError):
    """No relayer is currently in the active set."""

    def __init__(self, message: str = "No active relayer available"):
        super().__init__(message, ErrorCode.NO_ACTIVE_RELAYER)
