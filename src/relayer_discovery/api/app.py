"""FastAPI application factory for the discovery service."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI

from relayer_discovery import __description__, __version__
from relayer_discovery.api.error_handlers import (
    discovery_exception_handler,
    unexpected_exception_handler,
)
from relayer_discovery.api.middleware import (
    CorrelationIDMiddleware,
    RequestLoggingMiddleware,
)
from relayer_discovery.api.routes import router
from relayer_discovery.config.settings import DiscoverySettings, get_settings
from relayer_discovery.discovery.freshness import FreshnessTracker
from relayer_discovery.discovery.prober import RelayerHealthProber
from relayer_discovery.discovery.scheduler import HealthProbeScheduler
from relayer_discovery.discovery.status import StatusAggregator
from relayer_discovery.domain.exceptions import DiscoveryError
from relayer_discovery.infrastructure.store.base import MembershipStore
from relayer_discovery.infrastructure.store.factory import create_membership_store

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the store and run the scheduler for the app's lifetime."""
    store: MembershipStore = app.state.store
    scheduler: HealthProbeScheduler = app.state.scheduler

    await store.connect()
    try:
        await scheduler.start()
        logger.info(
            "Relayer discovery service started",
            relayer_count=app.state.settings.relayer_count,
            interval_ms=app.state.settings.health_check_interval_ms,
            timeout_ms=app.state.settings.health_check_timeout_ms,
        )
        yield
    finally:
        logger.info("Shutting down relayer discovery service")
        await scheduler.stop()
        in_flight = scheduler.in_flight_rounds
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        if app.state.owns_http_client:
            await app.state.http_client.aclose()
        await store.disconnect()


def create_app(
    settings: DiscoverySettings | None = None,
    store: MembershipStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Wire components together and build the FastAPI application.

    Args:
        settings: Validated settings; read from the environment when omitted
        store: Membership store; chosen from settings when omitted
        http_client: Client used for relayer probes; owned by the app when omitted
    """
    settings = settings or get_settings()
    if store is None:
        store = create_membership_store(settings)
    owns_http_client = http_client is None
    http_client = http_client or httpx.AsyncClient()

    freshness = FreshnessTracker()
    prober = RelayerHealthProber(
        http_client,
        relayer_port=settings.relayer_port,
        timeout=settings.health_check_timeout_seconds,
        dns_suffix=settings.relayer_dns_suffix,
    )
    scheduler = HealthProbeScheduler(
        store,
        prober,
        freshness,
        relayer_count=settings.relayer_count,
        interval_seconds=settings.health_check_interval_seconds,
    )
    aggregator = StatusAggregator(
        store,
        freshness,
        relayer_count=settings.relayer_count,
        relayer_port=settings.relayer_port,
        health_check_interval_ms=settings.health_check_interval_ms,
        dns_suffix=settings.relayer_dns_suffix,
        service_name=settings.service_name,
    )

    app = FastAPI(
        title="Relayer Discovery Service",
        description=__description__,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.http_client = http_client
    app.state.owns_http_client = owns_http_client
    app.state.freshness = freshness
    app.state.scheduler = scheduler
    app.state.status_aggregator = aggregator

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    app.add_exception_handler(DiscoveryError, discovery_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)

    app.include_router(router)
    return app
