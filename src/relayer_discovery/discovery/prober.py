"""HTTP health probe for a single relayer."""

import asyncio
import time
from datetime import UTC, datetime

import httpx
import structlog

from relayer_discovery.discovery.relayers import relayer_health_url
from relayer_discovery.domain.models import ProbeResult

logger = structlog.get_logger(__name__)

EXPECTED_STATUS = 200


class RelayerHealthProber:
    """Probes ``GET http://<relayer>:<port>/health``.

    Any outcome other than HTTP 200 within the timeout is unhealthy. Network
    failures are folded into the result instead of raised, so one relayer's
    probe can never fail a round.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        relayer_port: int,
        timeout: float,
        dns_suffix: str | None = None,
    ):
        """Initialize the prober.

        Args:
            client: Shared HTTP client used for every probe
            relayer_port: Port every relayer listens on
            timeout: Per-probe timeout in seconds
            dns_suffix: Optional domain appended to relayer identities
        """
        self.client = client
        self.relayer_port = relayer_port
        self.timeout = timeout
        self.dns_suffix = dns_suffix

    def health_url(self, relayer_id: str) -> str:
        return relayer_health_url(relayer_id, self.relayer_port, self.dns_suffix)

    async def probe(self, relayer_id: str) -> ProbeResult:
        """Probe one relayer and classify the outcome."""
        url = self.health_url(relayer_id)
        start_time = time.perf_counter()
        status_code: int | None = None

        try:
            # httpx applies the timeout per phase; bound the whole request too
            async with asyncio.timeout(self.timeout):
                response = await self.client.get(url, timeout=self.timeout)
            status_code = response.status_code
            healthy = status_code == EXPECTED_STATUS
            reason = "ok" if healthy else f"HTTP {status_code}"
        except (httpx.TimeoutException, TimeoutError):
            healthy, reason = False, "timeout"
        except httpx.ConnectError as e:
            healthy, reason = False, f"connection failed: {_describe(e)}"
        except httpx.HTTPError as e:
            healthy, reason = False, f"request failed: {_describe(e)}"
        except Exception as e:
            logger.exception("Unexpected error probing relayer", relayer_id=relayer_id)
            healthy, reason = False, f"unexpected error: {_describe(e)}"

        result = ProbeResult(
            relayer_id=relayer_id,
            healthy=healthy,
            reason=reason,
            checked_at=datetime.now(UTC),
            response_time_ms=(time.perf_counter() - start_time) * 1000,
            status_code=status_code,
        )

        if healthy:
            logger.debug(
                "Health check passed",
                relayer_id=relayer_id,
                response_time_ms=round(result.response_time_ms, 2),
            )
        else:
            logger.warning(
                "Health check failed", relayer_id=relayer_id, reason=reason, url=url
            )

        return result


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__
