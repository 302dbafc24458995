"""Test configuration and fixtures."""

from collections import Counter
from collections.abc import Awaitable, Callable

import httpx
import pytest
import pytest_asyncio

from relayer_discovery.config.settings import DiscoverySettings
from relayer_discovery.discovery.freshness import FreshnessTracker
from relayer_discovery.discovery.prober import RelayerHealthProber
from relayer_discovery.infrastructure.store.memory import InMemoryMembershipStore

CONFIG_ENV_VARS = (
    "RELAYER_COUNT",
    "RELAYER_PORT",
    "RELAYER_DNS_SUFFIX",
    "RELAYER_API_KEY",
    "HEALTH_CHECK_INTERVAL_MS",
    "HEALTH_CHECK_TIMEOUT_MS",
    "ACTIVE_SET_KEY",
    "USE_REDIS",
    "SERVICE_NAME",
    "HOST",
    "PORT",
    "REDIS_HOST",
    "REDIS_PORT",
    "REDIS_DB",
    "REDIS_PASSWORD",
    "OBSERVABILITY_LOG_LEVEL",
    "OBSERVABILITY_LOG_FORMAT",
)


class FakeRelayerPool:
    """Stands in for the relayers' ``/health`` endpoints.

    ``outcomes`` maps a relayer host to an HTTP status code or an httpx
    exception class; hosts not listed answer 200. When ``gate`` is set every
    request awaits it before answering.
    """

    def __init__(self) -> None:
        self.outcomes: dict[str, int | type[httpx.HTTPError]] = {}
        self.requests: Counter[str] = Counter()
        self.urls: list[str] = []
        self.gate: Callable[[str], Awaitable[None]] | None = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.requests[host] += 1
        self.urls.append(str(request.url))
        if self.gate is not None:
            await self.gate(host)

        outcome = self.outcomes.get(host, 200)
        if isinstance(outcome, int):
            return httpx.Response(outcome, json={"status": "ok"})
        raise outcome(f"simulated {outcome.__name__}", request=request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def total_requests(self) -> int:
        return sum(self.requests.values())


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables out of settings under test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> DiscoverySettings:
    return DiscoverySettings(
        _env_file=None,
        relayer_count=3,
        relayer_port=3000,
        health_check_interval_ms=10000,
        health_check_timeout_ms=500,
        use_redis=False,
    )


@pytest.fixture
def relayer_pool() -> FakeRelayerPool:
    return FakeRelayerPool()


@pytest_asyncio.fixture
async def http_client(relayer_pool):
    client = relayer_pool.client()
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def store():
    store = InMemoryMembershipStore()
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
def freshness() -> FreshnessTracker:
    return FreshnessTracker()


@pytest.fixture
def prober(http_client) -> RelayerHealthProber:
    return RelayerHealthProber(http_client, relayer_port=3000, timeout=0.5)
