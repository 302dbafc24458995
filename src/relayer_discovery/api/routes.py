"""Status, liveness and readiness endpoints."""

from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from relayer_discovery import __version__
from relayer_discovery.api.dependencies import (
    get_membership_store,
    get_settings_dependency,
    get_status_aggregator,
)
from relayer_discovery.config.settings import DiscoverySettings
from relayer_discovery.discovery.status import StatusAggregator
from relayer_discovery.domain.exceptions import StoreConnectionError
from relayer_discovery.domain.models import StatusResponse
from relayer_discovery.infrastructure.store.base import MembershipStore

router = APIRouter(tags=["discovery"])


@router.get("/status", response_model=StatusResponse)
async def get_status(
    aggregator: Annotated[StatusAggregator, Depends(get_status_aggregator)],
) -> StatusResponse:
    """Current relayer pool status.

    Always answers 200; pool degradation is reported in the body.
    """
    return await aggregator.get_status()


@router.get("/health", response_model=dict[str, str])
async def liveness_check(
    settings: Annotated[DiscoverySettings, Depends(get_settings_dependency)],
) -> dict[str, str]:
    """Liveness of this process only; does not touch the store."""
    return {
        "status": "ok",
        "service": settings.service_name,
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/ready", response_model=dict[str, Any])
async def readiness_check(
    store: Annotated[MembershipStore, Depends(get_membership_store)],
    settings: Annotated[DiscoverySettings, Depends(get_settings_dependency)],
) -> dict[str, Any]:
    """Readiness: the membership store answers a ping.

    Raises:
        StoreConnectionError: The store is unreachable (503)
    """
    if not await store.health_check():
        raise StoreConnectionError("Membership store unreachable", "health_check")

    return {
        "status": "ready",
        "service": settings.service_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "checks": {"membership_store": "healthy"},
    }
