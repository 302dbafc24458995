"""Domain layer: value objects and exceptions."""

from .exceptions import (
    DiscoveryError,
    MembershipStoreError,
    NoActiveRelayerError,
    StoreConnectionError,
    StoreNotConnectedError,
)
from .models import (
    ErrorCode,
    PoolStatus,
    ProbeResult,
    RelayerHealth,
    RelayerStatusView,
    RoundSummary,
    StatusResponse,
)

__all__ = [
    "DiscoveryError",
    "MembershipStoreError",
    "NoActiveRelayerError",
    "StoreConnectionError",
    "StoreNotConnectedError",
    "ErrorCode",
    "PoolStatus",
    "ProbeResult",
    "RelayerHealth",
    "RelayerStatusView",
    "RoundSummary",
    "StatusResponse",
]
