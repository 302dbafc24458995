"""Aggregate pool status computed on every read."""

from datetime import UTC, datetime

import structlog

from relayer_discovery.discovery.freshness import FreshnessTracker
from relayer_discovery.discovery.relayers import ordinal_sort_key, relayer_base_url
from relayer_discovery.domain.exceptions import MembershipStoreError
from relayer_discovery.domain.models import (
    PoolStatus,
    RelayerHealth,
    RelayerStatusView,
    StatusResponse,
)
from relayer_discovery.infrastructure.store.base import MembershipStore

logger = structlog.get_logger(__name__)


def classify_pool(active_count: int, configured_count: int) -> PoolStatus:
    """Classify the pool from its active and configured sizes.

    More active members than configured (stale entries after the pool was
    shrunk) still counts as healthy.
    """
    if active_count >= configured_count:
        return PoolStatus.HEALTHY
    if active_count > 0:
        return PoolStatus.DEGRADED
    return PoolStatus.UNHEALTHY


class StatusAggregator:
    """Builds ``StatusResponse`` from the active set and freshness data.

    One store read per call and no outbound probing, so it stays responsive
    while a round is in flight.
    """

    def __init__(
        self,
        store: MembershipStore,
        freshness: FreshnessTracker,
        relayer_count: int,
        relayer_port: int,
        health_check_interval_ms: int,
        dns_suffix: str | None = None,
        service_name: str = "relayer-discovery",
    ):
        self.store = store
        self.freshness = freshness
        self.relayer_count = relayer_count
        self.relayer_port = relayer_port
        self.health_check_interval_ms = health_check_interval_ms
        self.dns_suffix = dns_suffix
        self.service_name = service_name

    async def get_status(self) -> StatusResponse:
        try:
            active_ids = await self.store.members()
        except MembershipStoreError as e:
            logger.error("Failed to read active set", error=str(e))
            active_ids = set()

        active_relayers = [
            RelayerStatusView(
                id=relayer_id,
                status=RelayerHealth.HEALTHY,
                last_check_timestamp=self.freshness.last_checked(relayer_id),
                url=relayer_base_url(relayer_id, self.relayer_port, self.dns_suffix),
            )
            for relayer_id in sorted(active_ids, key=ordinal_sort_key)
        ]

        return StatusResponse(
            service=self.service_name,
            status=classify_pool(len(active_relayers), self.relayer_count),
            timestamp=datetime.now(UTC),
            active_relayers=active_relayers,
            total_configured=self.relayer_count,
            total_active=len(active_relayers),
            health_check_interval=self.health_check_interval_ms,
        )
