"""Service test fixtures — fake PostgREST store + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory store
    - get_table_client overridden with a real RemoteTableClient whose transport
      is the fake store, so the wire format is exercised end to end
    - raise_app_exceptions=False: unhandled errors come back as the 500 envelope
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from examhub.infrastructure.remote_tables import RemoteTableClient, get_table_client
from examhub.main import app
from tests.services.fake_rest_store import FakeRestStore


@pytest.fixture
def store():
    return FakeRestStore()


@pytest.fixture
async def tables(store):
    client = RemoteTableClient(
        "http://store.test", "test-service-key",
        transport=httpx.MockTransport(store.handler),
    )
    yield client
    await client.aclose()


@pytest.fixture
async def client(tables):
    """FastAPI test client with the table client dependency overridden."""
    app.dependency_overrides[get_table_client] = lambda: tables

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

