"""Shared pytest fixtures and configuration for all tests."""
import asyncio
import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from sqlalchemy.orm import sessionmaker

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from ideahub import models  # noqa: E402,F401
from ideahub.auth import create_access_token  # noqa: E402
from ideahub.database import Base, build_engine  # noqa: E402
from ideahub.errors import RemoteStoreError  # noqa: E402
from ideahub.schemas import UserAuth  # noqa: E402
from ideahub.store import FileStorage, LocalStore, RemoteStore  # noqa: E402

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

TEST_USERS = [
    {
        "id": "user-alice",
        "email": "alice@company.com",
        "full_name": "Alice Johnson",
        "department": "Operations",
        "role": "admin",
    },
    {
        "id": "user-bob",
        "email": "bob@company.com",
        "full_name": "Bob Smith",
        "department": "Engineering",
        "role": "user",
    },
]


def run(coroutine):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coroutine)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def local_store(session_factory):
    """Local store seeded with the test users."""
    store = LocalStore(session_factory)
    run(store.insert_many("users", [dict(user) for user in TEST_USERS]))
    return store


@pytest.fixture
def alice():
    return UserAuth(user_id="user-alice", email="alice@company.com", name="Alice Johnson")


@pytest.fixture
def bob():
    return UserAuth(user_id="user-bob", email="bob@company.com", name="Bob Smith")


@pytest.fixture
def make_token():
    """Create a signed access token for a test user."""
    def _create_token(user_id: str, expires_delta: Optional[timedelta] = None, **claims):
        minutes = int(expires_delta.total_seconds() // 60) if expires_delta else 30
        return create_access_token({"sub": user_id, **claims}, expires_in_minutes=minutes)

    return _create_token


class FlakyStore(RemoteStore):
    """Wraps a store and fails selected operations, recording every call."""

    def __init__(self, inner: RemoteStore):
        self.inner = inner
        self.fail_select = False
        self.fail_insert_tables: set = set()
        self.call_log: List[str] = []

    async def select(self, query):
        self.call_log.append(f"SELECT {query.table}")
        if self.fail_select:
            raise RemoteStoreError("network error", status_code=503)
        return await self.inner.select(query)

    async def insert_many(self, table, rows):
        self.call_log.append(f"INSERT {table} x{len(rows)}")
        if table in self.fail_insert_tables:
            raise RemoteStoreError("network error", status_code=503)
        return await self.inner.insert_many(table, rows)

    def count(self, prefix: str) -> int:
        return sum(1 for entry in self.call_log if entry.startswith(prefix))


@pytest.fixture
def flaky_store(local_store):
    return FlakyStore(local_store)


class MemoryFileStorage(FileStorage):
    """File storage keeping uploads in a dict."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.fail = False

    async def upload(self, path, content, content_type):
        if self.fail:
            raise RemoteStoreError("storage unavailable", status_code=503)
        self.files[path] = content
        return f"https://files.test/{path}"


@pytest.fixture
def memory_storage():
    return MemoryFileStorage()


@pytest.fixture
def idea_factory(local_store):
    """Insert ideas directly into the local store."""
    def _create_idea(**overrides):
        row = {
            "title": "Standing desks for everyone",
            "description": "Offer standing desks on request.",
            "category": "employee-experience",
            "user_id": "user-alice",
        }
        row.update(overrides)
        return run(local_store.insert("ideas", row))

    return _create_idea


@pytest.fixture
def timestamps():
    """Three distinct creation times T1 < T2 < T3."""
    base = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    return [base, base + timedelta(hours=1), base + timedelta(hours=2)]


# Configure pytest
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "api: mark test as API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")


# Auto-use fixtures for test environment setup
@pytest.fixture(autouse=True)
def setup_test_logging():
    """Set up logging configuration for tests."""
    logging.getLogger().setLevel(logging.WARNING)

    # Suppress noisy loggers
    for logger_name in ['httpx', 'sqlalchemy', 'multipart']:
        logging.getLogger(logger_name).setLevel(logging.ERROR)
