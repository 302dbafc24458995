"""
Helpers for services that consume the discovery status.

An upstream router polls ``/status`` before admitting work and picks one of
the active relayers for each transaction.
"""

from dataclasses import dataclass, field

import httpx
import structlog
from pydantic import SecretStr

from relayer_discovery.domain.exceptions import NoActiveRelayerError
from relayer_discovery.domain.models import PoolStatus, StatusResponse

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RelayerTarget:
    """A relayer chosen to receive a transaction."""

    relayer_id: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)


class DiscoveryClient:
    """Reads pool status from a discovery service instance."""

    def __init__(self, base_url: str, client: httpx.AsyncClient, timeout: float = 2.0):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def get_status(self) -> StatusResponse:
        """Fetch ``/status``. Transport and HTTP errors propagate as httpx errors."""
        response = await self.client.get(f"{self.base_url}/status", timeout=self.timeout)
        response.raise_for_status()
        return StatusResponse.model_validate(response.json())

    async def can_accept_work(self) -> bool:
        status = await self.get_status()
        return status.status != PoolStatus.UNHEALTHY


class RelayerSelector:
    """Round-robin choice over the active relayers of a status snapshot."""

    def __init__(self, api_key: SecretStr | str | None = None):
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self._api_key = api_key or None
        self._index = 0

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"Authorization": f"Bearer {self._api_key}"}

    def select(self, status: StatusResponse) -> RelayerTarget:
        """Pick the next active relayer.

        Raises:
            NoActiveRelayerError: The snapshot has no active relayer
        """
        relayers = status.active_relayers
        if not relayers:
            raise NoActiveRelayerError()

        chosen = relayers[self._index % len(relayers)]
        self._index = (self._index + 1) % len(relayers)
        logger.debug("Selected relayer", relayer_id=chosen.id, active=len(relayers))
        return RelayerTarget(relayer_id=chosen.id, url=chosen.url, headers=self._headers())
