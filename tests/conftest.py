"""Shared test fixtures: in-memory collaborators, a controllable clock, HTTP clients."""

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

from app import create_app
from config import Settings
from services.cache import TransactionCache
from services.identity import InMemoryIdentityProvider
from services.store import InMemoryDocumentStore


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TransactionCache:
    return TransactionCache(ttl_seconds=30, clock=clock)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def identity() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def app(store, identity, cache):
    config = Settings()
    config.firebase_project_id = None
    config.default_currency = "USD"
    config.git_sha = "3f9c2ab"
    application = create_app(config=config, store=store, identity=identity, cache=cache)
    application.state.services.transactions.today = lambda: date(2026, 3, 15)
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Authenticated client: signs up a user and injects the Bearer token."""
    resp = await client.post("/auth/sign-up", json={
        "name": "Alice Example",
        "email": "alice@example.com",
        "password": "correct-horse",
    })
    assert resp.status_code == 201
    token = resp.json()["token"]
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client
