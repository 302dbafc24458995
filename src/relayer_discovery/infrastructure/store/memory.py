"""
In-memory membership store for development and testing.

Membership lives in this process only, so it is not shared between
service instances.
"""

import structlog

from relayer_discovery.infrastructure.store.base import BaseMembershipStore

logger = structlog.get_logger(__name__)


class InMemoryMembershipStore(BaseMembershipStore):
    """Process-local set of active relayer identities."""

    def __init__(self, key: str = "relayer:active") -> None:
        super().__init__(key)
        self._members: set[str] = set()

    async def connect(self) -> None:
        """Initialize in-memory storage."""
        self._connected = True
        logger.info("In-memory membership store ready", key=self.key)

    async def disconnect(self) -> None:
        """Clear in-memory storage."""
        self._members.clear()
        self._connected = False

    async def add(self, member: str) -> bool:
        self._ensure_connected("add")
        if member in self._members:
            return False
        self._members.add(member)
        return True

    async def remove(self, member: str) -> bool:
        self._ensure_connected("remove")
        if member not in self._members:
            return False
        self._members.discard(member)
        return True

    async def members(self) -> set[str]:
        self._ensure_connected("members")
        return set(self._members)

    async def count(self) -> int:
        self._ensure_connected("count")
        return len(self._members)
