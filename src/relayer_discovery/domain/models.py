"""Domain models for the relayer discovery service."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PoolStatus(str, Enum):
    """Aggregate classification of the relayer pool."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class RelayerHealth(str, Enum):
    """Health of a single relayer."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ErrorCode(str, Enum):
    """Error codes surfaced by the service."""

    STORE_NOT_CONNECTED = "store_not_connected"
    STORE_CONNECTION_ERROR = "store_connection_error"
    STORE_ERROR = "store_error"
    NO_ACTIVE_RELAYER = "no_active_relayer"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one relayer health probe."""

    relayer_id: str
    healthy: bool
    reason: str
    checked_at: datetime
    response_time_ms: float
    status_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "relayer_id": self.relayer_id,
            "healthy": self.healthy,
            "reason": self.reason,
            "checked_at": self.checked_at.isoformat(),
            "response_time_ms": self.response_time_ms,
            "status_code": self.status_code,
        }


@dataclass
class RoundSummary:
    """What one health-check round observed."""

    started_at: datetime
    finished_at: datetime | None = None
    healthy: list[str] = field(default_factory=list)
    unhealthy: list[str] = field(default_factory=list)
    store_errors: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.healthy) + len(self.unhealthy)

    @property
    def duration_ms(self) -> float:
        end = self.finished_at or datetime.now(UTC)
        return (end - self.started_at).total_seconds() * 1000


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class RelayerStatusView(CamelModel):
    """One active relayer as reported by ``/status``."""

    id: str
    status: RelayerHealth = RelayerHealth.HEALTHY
    last_check_timestamp: datetime | None = None
    url: str


class StatusResponse(CamelModel):
    """Point-in-time view of the relayer pool."""

    service: str = "relayer-discovery"
    status: PoolStatus
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    active_relayers: list[RelayerStatusView] = Field(default_factory=list)
    total_configured: int
    total_active: int
    health_check_interval: int = Field(
        description="Configured probe cadence in milliseconds"
    )
