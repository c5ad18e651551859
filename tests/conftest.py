"""Pytest configuration and fixtures."""

import asyncio
import itertools
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from shortener_client.common.logging_config import setup_logging
from shortener_client.errors import NotFoundError, TransportError
from shortener_client.gateway.base import LinkGatewayBase
from shortener_client.gateway.models import Link, QrImage
from shortener_client.progress import ProgressTracker
from shortener_client.store import LinkStore


class FakeLinkGateway(LinkGatewayBase):
    """In-memory backend that records calls.

    ``gates[operation]`` may hold an ``asyncio.Event``; the operation waits on
    it after being called, which lets tests interleave overlapping calls.
    ``failures[operation]`` may hold an exception raised on the next call.
    """

    def __init__(self):
        super().__init__("http://backend.test/api/v1")
        self.links: List[Link] = []
        self.calls: Counter = Counter()
        self.gates: Dict[str, asyncio.Event] = {}
        self.failures: Dict[str, Exception] = {}
        self.closed = False
        self._ids = itertools.count(1)

    def add_remote(self, original_url: str, expired_in: Optional[datetime] = None) -> Link:
        link_id = f"link{next(self._ids)}"
        link = Link(
            id=link_id,
            original_url=original_url,
            shortened_url=f"http://sho.rt/{link_id}",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            expired_in=expired_in,
        )
        self.links.append(link)
        return link

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()
        failure = self.failures.pop(operation, None)
        if failure is not None:
            raise failure

    async def list_mine(self) -> List[Link]:
        await self._enter("list")
        return list(self.links)

    async def create(self, original_url, expired_in=None) -> Link:
        await self._enter("create")
        return self.add_remote(original_url, expired_in)

    async def delete(self, link_id: str) -> None:
        await self._enter("delete")
        remaining = [link for link in self.links if link.id != link_id]
        if len(remaining) == len(self.links):
            raise NotFoundError(f"Link '{link_id}' not found")
        self.links = remaining

    async def request_qr_code(self, link_id: str) -> QrImage:
        await self._enter("qr")
        if not any(link.id == link_id for link in self.links):
            raise NotFoundError(f"Link '{link_id}' not found")
        return QrImage(link_id=link_id, data=f"png:{link_id}".encode(), content_type="image/png")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def gateway():
    """In-memory backend."""
    return FakeLinkGateway()


@pytest.fixture
def progress():
    """Fresh progress tracker per test."""
    return ProgressTracker(start_step=30, finish_step=70)


@pytest.fixture
def store(gateway, progress, logger) -> LinkStore:
    """Link store over the in-memory backend."""
    return LinkStore(gateway=gateway, progress=progress, logger=logger)


@pytest.fixture
def transport_error():
    return TransportError("connection refused")


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def settle():
    """Let every ready task on the loop run until it blocks."""

    async def _settle():
        for _ in range(5):
            await asyncio.sleep(0)

    return _settle
