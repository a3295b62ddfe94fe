"""Shared test fixtures for the Contact Hub test suite."""

import os

# Must be set before contacthub.core.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["STORAGE_BACKEND"] = "memory"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from contacthub.core.dependencies import get_store
from contacthub.main import app
from contacthub.repositories.store import ContactStore
from contacthub.services.contact_service import ContactService
from tests.helpers import RecordingPublisher

# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def store() -> ContactStore:
    return ContactStore.in_memory()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(store: ContactStore, publisher: RecordingPublisher) -> ContactService:
    return ContactService(store, publisher=publisher)


@pytest.fixture
async def client(store: ContactStore) -> AsyncGenerator[AsyncClient, None]:
    async def _override_store():
        yield store

    app.dependency_overrides[get_store] = _override_store
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
