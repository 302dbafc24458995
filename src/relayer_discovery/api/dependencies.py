"""Shared API dependencies."""

from fastapi import Request

from relayer_discovery.config.settings import DiscoverySettings
from relayer_discovery.discovery.status import StatusAggregator
from relayer_discovery.infrastructure.store.base import MembershipStore


def get_status_aggregator(request: Request) -> StatusAggregator:
    """Status aggregator built by the application factory."""
    return request.app.state.status_aggregator  # type: ignore[no-any-return]


def get_membership_store(request: Request) -> MembershipStore:
    return request.app.state.store  # type: ignore[no-any-return]


def get_settings_dependency(request: Request) -> DiscoverySettings:
    return request.app.state.settings  # type: ignore[no-any-return]
