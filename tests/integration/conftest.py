"""Integration test configuration."""

import pytest
from fastapi.testclient import TestClient

from relayer_discovery.api.app import create_app
from relayer_discovery.infrastructure.store.memory import InMemoryMembershipStore


@pytest.fixture
def membership_store() -> InMemoryMembershipStore:
    return InMemoryMembershipStore()


@pytest.fixture
def app(settings, membership_store, relayer_pool):
    """Application wired to the fake relayer pool and an in-memory store."""
    return create_app(
        settings, store=membership_store, http_client=relayer_pool.client()
    )


@pytest.fixture
def make_client(app):
    """Start the app lifespan; the first health-check round runs on entry."""

    def _make(**kwargs) -> TestClient:
        return TestClient(app, **kwargs)

    return _make
