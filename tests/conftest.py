"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport

from tinylink.config import Config
from tinylink.database.memory import InMemoryLinkStore
from tinylink.registry import LinkRegistry
from tinylink.common.logging_config import setup_logging
from tinylink.web_app import create_app


class FakeClock:
    """Deterministic clock: each call moves one second forward."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start
        self.calls = []

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        self.calls.append(self.now)
        return self.now


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(logger):
    """Create in-memory store."""
    return InMemoryLinkStore(logger=logger)


@pytest.fixture
def registry(store, clock, logger) -> LinkRegistry:
    """Create registry instance."""
    return LinkRegistry(store=store, logger=logger, clock=clock)


@pytest.fixture
def config():
    return Config(
        store_backend="memory",
        base_url="http://testserver",
        _env_file=None,
    )


@pytest.fixture
def app(store, registry, config):
    """Create test FastAPI app."""
    return create_app(
        store_instance=store,
        registry_instance=registry,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
