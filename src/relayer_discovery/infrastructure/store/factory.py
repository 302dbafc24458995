"""Membership store selection based on configuration."""

import structlog

from relayer_discovery.config.settings import DiscoverySettings
from relayer_discovery.infrastructure.store.base import BaseMembershipStore
from relayer_discovery.infrastructure.store.memory import InMemoryMembershipStore
from relayer_discovery.infrastructure.store.redis import RedisMembershipStore

logger = structlog.get_logger(__name__)


def create_membership_store(settings: DiscoverySettings) -> BaseMembershipStore:
    """Create the membership store configured by ``use_redis``."""
    store: BaseMembershipStore
    if settings.use_redis:
        backend_type = "redis"
        store = RedisMembershipStore(settings.redis, key=settings.active_set_key)
    else:
        backend_type = "memory"
        store = InMemoryMembershipStore(key=settings.active_set_key)
        logger.warning(
            "Using in-memory membership store; active set is not shared"
        )

    logger.info(
        "Created membership store", backend_type=backend_type, key=settings.active_set_key
    )
    return store
