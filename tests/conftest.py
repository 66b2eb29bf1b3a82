"""
Pytest Configuration and Shared Fixtures

Provides a pinned clock (Wednesday 2024-05-15 10:30 UTC) and an in-memory
document store seeded with a small poetry site, so every test runs without
a database.
"""
import os
import sys
import time
import pytest
from typing import Any, Dict, Generator, List
from datetime import datetime, timezone

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


NOW = datetime(2024, 5, 15, 10, 30, tzinfo=timezone.utc)

API_PREFIX = "/api/v1"


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


# ==================== Settings ====================

@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep host environment variables out of the settings under test"""
    from poetry_console.core.settings import reset_settings

    for name in list(os.environ):
        if name.startswith("POETRY_CONSOLE_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def analytics_settings():
    """Analytics settings pinned to UTC"""
    from poetry_console.core.settings import AnalyticsSettings
    return AnalyticsSettings(timezone="UTC")


@pytest.fixture
def app_settings(analytics_settings):
    """Application settings with the in-memory store"""
    from poetry_console.core.settings import AppSettings, StoreProvider

    settings = AppSettings()
    settings.store.provider = StoreProvider.MEMORY
    settings.analytics = analytics_settings
    return settings


@pytest.fixture
def fixed_clock():
    """Clock returning Wednesday 2024-05-15 10:30 UTC"""
    return lambda: NOW


@pytest.fixture
def new_york_host(monkeypatch):
    """Run with America/New_York as the host local zone"""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


# ==================== Test Data Fixtures ====================

@pytest.fixture
def sample_users() -> List[Dict[str, Any]]:
    return [
        {
            "id": "doc_u1",
            "userId": "u1",
            "name": "Alice",
            "email": "alice@example.com",
            "createdAt": "2024-05-15T08:00:00Z",
        },
        {
            "id": "doc_u2",
            "userId": "u2",
            "displayName": "Bob",
            "email": "bob@example.com",
            "createdAt": epoch_millis(datetime(2023, 3, 10, 12, 0, tzinfo=timezone.utc)),
        },
        {
            "id": "u3",
            "email": "carol@example.com",
            "createdAt": "2022-12-31T23:00:00Z",
        },
    ]


@pytest.fixture
def sample_poems() -> List[Dict[str, Any]]:
    return [
        {
            "id": "p1",
            "slug": "morning-light",
            "title": "Morning Light",
            "author": "Alice",
            "userId": "u1",
            "datePosted": "2024-05-15T10:05:00Z",
        },
        {
            "id": "p2",
            "slug": "evening-tide",
            "title": "Evening Tide",
            "author": "Bob",
            "userId": "u2",
            "datePosted": "2024-05-13T09:00:00Z",
        },
        {
            "id": "p3",
            "slug": "winter-song",
            "title": "Winter Song",
            "author": "Alice",
            "userId": "u1",
            "datePosted": datetime(2023, 1, 20, tzinfo=timezone.utc),
        },
        {
            "id": "p4",
            "slug": "old-verse",
            "title": "Old Verse",
            "author": "Dana",
            "datePosted": "2022-06-01T00:00:00Z",
        },
        {
            "id": "p5",
            "slug": "draft",
            "title": "Draft",
            "author": "Eve",
            "datePosted": "not a date",
        },
    ]


@pytest.fixture
def sample_comments() -> List[Dict[str, Any]]:
    return [
        {
            "id": "c1",
            "poemSlug": "morning-light",
            "userId": "u1",
            "name": "Alice",
            "author": "Alice",
            "content": "Lovely imagery",
            "timestamp": "2024-05-15T09:00:00Z",
        },
        {
            "id": "c2",
            "poemSlug": "morning-light",
            "userId": "u1",
            "author": "Alice",
            "content": "Read it again",
            "timestamp": "2024-05-15T10:00:00Z",
            "adminReply": "Thanks!",
        },
        {
            "id": "c3",
            "poemSlug": "evening-tide",
            "userId": "u2",
            "author": "Bob",
            "content": "So calm",
            "timestamp": "2024-05-14T12:00:00Z",
            "adminReply": "   ",
        },
        {
            "id": "c4",
            "poemSlug": "ghost-poem",
            "userId": "u2",
            "author": "Bob",
            "content": "Where did it go?",
            "timestamp": "2024-05-15T09:30:00Z",
        },
        {
            "id": "c5",
            "poemSlug": "winter-song",
            "email": "guest@example.com",
            "author": "Guest",
            "content": "Brr",
            "timestamp": "2024-01-02T00:00:00Z",
        },
    ]


@pytest.fixture
def sample_requests() -> List[Dict[str, Any]]:
    return [
        {"id": "r1", "title": "A poem about rain"},
        {"id": "r2", "title": "Something for my mother"},
    ]


# ==================== Store / Service Fixtures ====================

@pytest.fixture
def memory_store(sample_users, sample_poems, sample_comments, sample_requests):
    """In-memory store seeded with the sample site"""
    from poetry_console.infrastructure.memory.document_store import MemoryDocumentStore
    from poetry_console.ports.document_store_port import Collection

    return MemoryDocumentStore(seed={
        Collection.USERS: sample_users,
        Collection.POEMS: sample_poems,
        Collection.COMMENTS: sample_comments,
        Collection.POEM_REQUESTS: sample_requests,
    })


@pytest.fixture
def empty_store():
    from poetry_console.infrastructure.memory.document_store import MemoryDocumentStore
    return MemoryDocumentStore()


@pytest.fixture
def failing_store():
    """Store whose every read fails"""
    from poetry_console.core.exceptions import StoreReadError
    from poetry_console.ports.document_store_port import DocumentStorePort

    class FailingDocumentStore(DocumentStorePort):
        def __init__(self):
            self.calls = 0

        async def list_all(self, collection):
            self.calls += 1
            raise StoreReadError(collection.value, "connection refused")

        async def count(self, collection):
            self.calls += 1
            raise StoreReadError(collection.value, "connection refused")

    return FailingDocumentStore()


@pytest.fixture
def stats_service(memory_store, analytics_settings, fixed_clock):
    from poetry_console.services.dashboard_stats_service import DashboardStatsService
    return DashboardStatsService(memory_store, settings=analytics_settings, clock=fixed_clock)


@pytest.fixture
def moderation_service(memory_store, analytics_settings):
    from poetry_console.services.moderation_service import ModerationService
    return ModerationService(memory_store, settings=analytics_settings)


# ==================== FastAPI Test Client ====================

@pytest.fixture
def test_app(app_settings, memory_store, fixed_clock):
    """Create test FastAPI application backed by the seeded store"""
    from poetry_console.main import create_app
    return create_app(app_settings, document_store=memory_store, clock=fixed_clock)


@pytest.fixture
def client(test_app) -> Generator:
    """Provide FastAPI test client"""
    from fastapi.testclient import TestClient

    with TestClient(test_app) as test_client:
        yield test_client


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "api: API endpoint tests")
