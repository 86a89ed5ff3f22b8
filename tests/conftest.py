"""Pytest configuration and fixtures."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, List, Optional

import asyncpg
import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlink.common.logging_config import setup_logging
from shortlink.database import InMemoryLinkStore
from shortlink.database.models import Link
from shortlink.identifier import IdentifierCodec
from shortlink.metrics import MetricsSink
from shortlink.service import LinkService
from web_app import create_app


class SlowLinkStore(InMemoryLinkStore):
    """In-memory store whose calls outlast the timeout budget."""

    def __init__(self, delay: float = 1.0, **kwargs):
        super().__init__(**kwargs)
        self.delay = delay

    async def _insert(self, link_id: str, target_url: str) -> Link:
        await asyncio.sleep(self.delay)
        return await super()._insert(link_id, target_url)

    async def _find_by_id(self, link_id: str) -> Optional[Link]:
        await asyncio.sleep(self.delay)
        return await super()._find_by_id(link_id)

    async def _list_all(self) -> List[Link]:
        await asyncio.sleep(self.delay)
        return await super()._list_all()

    async def _increment_redirect_count(self, link_id: str) -> Optional[Link]:
        await asyncio.sleep(self.delay)
        return await super()._increment_redirect_count(link_id)


class BrokenLinkStore(InMemoryLinkStore):
    """In-memory store whose backend raises on every call."""

    async def _insert(self, link_id: str, target_url: str) -> Link:
        raise ConnectionError("connection refused")

    async def _find_by_id(self, link_id: str) -> Optional[Link]:
        raise ConnectionError("connection refused")

    async def _list_all(self) -> List[Link]:
        raise ConnectionError("connection refused")

    async def _increment_redirect_count(self, link_id: str) -> Optional[Link]:
        raise ConnectionError("connection refused")

    async def health_check(self) -> bool:
        return False


class FakeConnection:
    """Answers the store's queries from a dict of rows."""

    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    async def execute(self, query, *args):
        self.executed.append(query)
        return "CREATE TABLE"

    async def fetchval(self, query, *args):
        self.executed.append(query)
        return 1

    async def fetchrow(self, query, *args):
        self.executed.append(query)
        link_id = args[0]

        if "INSERT" in query:
            if link_id in self.rows:
                raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
            now = datetime(2025, 1, 1, 12, 0, len(self.rows))
            self.rows[link_id] = {
                "id": link_id,
                "target_url": args[1],
                "count_redirects": 0,
                "created_at": now,
                "updated_at": now,
            }
            return dict(self.rows[link_id])

        if "UPDATE" in query:
            row = self.rows.get(link_id)
            if row is None:
                return None
            row["count_redirects"] += 1
            row["updated_at"] = datetime(2025, 1, 2)
            return dict(row)

        row = self.rows.get(link_id)
        return dict(row) if row else None

    async def fetch(self, query, *args):
        self.executed.append(query)
        return sorted(
            (dict(row) for row in self.rows.values()),
            key=lambda r: (r["created_at"], r["id"]),
        )


class FakePool:
    def __init__(self):
        self.rows = {}
        self.connection = FakeConnection(self.rows)
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        yield self.connection

    async def close(self):
        self.closed = True


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def metrics():
    return MetricsSink()


@pytest.fixture
def store(metrics, logger) -> InMemoryLinkStore:
    """Create in-memory link store."""
    return InMemoryLinkStore(metrics=metrics, logger=logger)


@pytest.fixture
def codec():
    """Create identifier codec."""
    return IdentifierCodec(length=5)


@pytest.fixture
def service(store, codec, metrics, logger) -> LinkService:
    """Create service instance."""
    return LinkService(store=store, codec=codec, metrics=metrics, logger=logger)


@pytest.fixture
def config():
    """Create test configuration."""
    return Config(
        storage_backend="memory",
        should_rate_limit=False,
    )


@pytest.fixture
def app(service, config, metrics):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config, metrics=metrics)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://crates.io/",
        "https://github.com/",
        "https://stackoverflow.com/questions/123456",
    ]
