"""
Membership store interface and base class.

A membership store wraps one named set in a shared store. Every operation is
idempotent, so any number of uncoordinated service instances may write the
same facts to it concurrently.
"""

from abc import ABC, abstractmethod
from typing import Protocol

from relayer_discovery.domain.exceptions import StoreNotConnectedError


class MembershipStore(Protocol):
    """Interface for the shared set of active relayer identities."""

    @property
    def is_connected(self) -> bool:
        """Whether ``connect()`` has completed."""
        ...

    async def connect(self) -> None:
        """Initialize connection to the storage backend."""
        ...

    async def disconnect(self) -> None:
        """Close connection to the storage backend."""
        ...

    async def health_check(self) -> bool:
        """Check if the storage backend is reachable."""
        ...

    async def add(self, member: str) -> bool:
        """Add a member. Returns True if it was not already present."""
        ...

    async def remove(self, member: str) -> bool:
        """Remove a member. Returns True if it was present."""
        ...

    async def members(self) -> set[str]:
        """Return current membership."""
        ...

    async def count(self) -> int:
        """Return the number of members."""
        ...


class BaseMembershipStore(ABC):
    """Base class with the connection guard shared by all backends."""

    def __init__(self, key: str) -> None:
        self.key = key
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if store is connected."""
        return self._connected

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    async def health_check(self) -> bool:
        """Basic health check implementation."""
        return self.is_connected

    @abstractmethod
    async def add(self, member: str) -> bool:
        pass

    @abstractmethod
    async def remove(self, member: str) -> bool:
        pass

    @abstractmethod
    async def members(self) -> set[str]:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    def _ensure_connected(self, operation: str) -> None:
        """Raise immediately if the store has not been connected."""
        if not self.is_connected:
            raise StoreNotConnectedError(operation)
