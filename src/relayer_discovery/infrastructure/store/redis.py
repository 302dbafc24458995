"""
Redis membership store.

Keeps the active relayer set in one Redis set shared by every discovery
instance. ``SADD``/``SREM`` report whether membership actually changed, which
is what the scheduler uses to log transitions.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis
import structlog
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from relayer_discovery.config.settings import RedisSettings
from relayer_discovery.domain.exceptions import (
    MembershipStoreError,
    StoreConnectionError,
)
from relayer_discovery.infrastructure.store.base import BaseMembershipStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Per-command retry: 3 attempts, 50ms doubling up to 2s
COMMAND_RETRIES = 3
BACKOFF_BASE_SECONDS = 0.05
BACKOFF_CAP_SECONDS = 2.0


class RedisMembershipStore(BaseMembershipStore):
    """Redis-backed set of active relayer identities."""

    def __init__(
        self,
        settings: RedisSettings,
        key: str = "relayer:active",
        client: redis.Redis | None = None,
    ):
        super().__init__(key)
        self.settings = settings
        self._redis: redis.Redis | None = client
        self._connection_lost = False

    def _build_client(self) -> redis.Redis:
        return redis.from_url(
            self.settings.url,
            decode_responses=True,
            max_connections=self.settings.max_connections,
            socket_timeout=self.settings.socket_timeout,
            socket_connect_timeout=self.settings.socket_timeout,
            retry_on_timeout=True,
            retry=Retry(
                ExponentialBackoff(cap=BACKOFF_CAP_SECONDS, base=BACKOFF_BASE_SECONDS),
                COMMAND_RETRIES,
            ),
        )

    async def connect(self) -> None:
        """Open the connection pool and verify the server answers."""
        if self._connected:
            return

        logger.info(
            "Initializing Redis connection",
            host=self.settings.host,
            port=self.settings.port,
            key=self.key,
        )
        if self._redis is None:
            self._redis = self._build_client()

        try:
            await self._redis.ping()
        except RedisError as e:
            logger.error("Redis connection error", error=str(e))
            await self._redis.aclose()
            self._redis = None
            raise StoreConnectionError(
                f"Failed to connect to Redis: {e}", "connect"
            ) from e

        self._connected = True
        self._connection_lost = False
        logger.info("Redis connected successfully")

    async def disconnect(self) -> None:
        """Close the connection pool. Safe to call more than once."""
        if self._redis is not None:
            logger.info("Closing Redis connection")
            await self._redis.aclose()
            self._redis = None
        self._connected = False

    async def health_check(self) -> bool:
        """Check Redis connection health."""
        if not self.is_connected or self._redis is None:
            return False

        try:
            await self._redis.ping()
        except RedisError as e:
            self._mark_connection_lost(e)
            return False
        self._mark_connection_restored()
        return True

    async def add(self, member: str) -> bool:
        added = await self._run("add", lambda r: r.sadd(self.key, member))
        return bool(added)

    async def remove(self, member: str) -> bool:
        removed = await self._run("remove", lambda r: r.srem(self.key, member))
        return bool(removed)

    async def members(self) -> set[str]:
        raw = await self._run("members", lambda r: r.smembers(self.key))
        return {m.decode() if isinstance(m, bytes) else str(m) for m in raw}

    async def count(self) -> int:
        return int(await self._run("count", lambda r: r.scard(self.key)))

    async def _run(
        self, operation: str, command: Callable[[redis.Redis], Awaitable[T]]
    ) -> T:
        """Run one command, translating Redis errors and tracking link state."""
        self._ensure_connected(operation)
        client = self._redis
        if client is None:
            raise StoreConnectionError("Redis connection not available", operation)

        try:
            result = await command(client)
        except (RedisConnectionError, RedisTimeoutError) as e:
            self._mark_connection_lost(e)
            raise StoreConnectionError(
                f"Redis {operation} failed: {e}", operation
            ) from e
        except RedisError as e:
            raise MembershipStoreError(
                f"Redis {operation} failed: {e}", operation
            ) from e

        self._mark_connection_restored()
        return result

    def _mark_connection_lost(self, error: Any) -> None:
        if not self._connection_lost:
            self._connection_lost = True
            logger.error("Redis connection lost", error=str(error))

    def _mark_connection_restored(self) -> None:
        if self._connection_lost:
            self._connection_lost = False
            logger.info("Redis connection restored")
