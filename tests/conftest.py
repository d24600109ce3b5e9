"""Shared test configuration and fixtures for all tests."""

from collections.abc import Generator
import os

from fastapi.testclient import TestClient
import pytest

# Keep tests independent of any local .env or Redis
os.environ.setdefault("REDIS_ADDR", "localhost:6399")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from todo_api.core.cache import initialize_cache, reset_cache  # noqa: E402
from todo_api.core.task_store import TaskStore, initialize_store, reset_store  # noqa: E402
from todo_api.main import app  # noqa: E402

from .fakes import FakeRedis, UnavailableRedis  # noqa: E402

VALID_AUTH = ("Mona", "42")
SECOND_VALID_AUTH = ("Liza", "315")


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Fresh in-process Redis for each test."""
    return FakeRedis()


@pytest.fixture
def store() -> Generator[TaskStore, None, None]:
    """Seeded global task store."""
    yield initialize_store()
    reset_store()


@pytest.fixture
def client(store: TaskStore, fake_redis: FakeRedis) -> Generator[TestClient, None, None]:
    """Test client wired to a seeded store and the fake Redis."""
    initialize_cache(client=fake_redis)
    yield TestClient(app)
    reset_cache()


@pytest.fixture
def unavailable_client(store: TaskStore) -> Generator[TestClient, None, None]:
    """Test client whose cache backend refuses every command."""
    initialize_cache(client=UnavailableRedis())
    yield TestClient(app)
    reset_cache()
