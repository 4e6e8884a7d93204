"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

The content backend is never contacted: every StrapiClient built here
talks to a FakeStrapi through httpx.MockTransport. Retry waits go through
RecordingSleep, so no test actually sleeps.
"""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest

from newsdesk.client.strapi import StrapiClient

BACKEND_URL = "http://strapi.test"

DEFAULT_TAGS: list[dict[str, Any]] = [
    {"id": 1, "attributes": {"name": "News"}},
    {"id": 2, "attributes": {"name": "sport"}},
    {"id": 3, "attributes": {"name": "Economy"}},
]


# =============================================================================
# Fake Backend
# =============================================================================


class FakeStrapi:
    """
    In-memory stand-in for the Strapi REST API.

    GET /api/tags answers from ``tags`` with ``tags_status``. Any request can
    be scripted with ``queue(method, path, *outcomes)``; each outcome is an
    httpx.Response or an exception to raise, consumed in order. Unscripted
    writes answer 404.
    """

    def __init__(self) -> None:
        self.tags: list[dict[str, Any]] = list(DEFAULT_TAGS)
        self.tags_status = 200
        self.requests: list[httpx.Request] = []
        self._queued: dict[tuple[str, str], list[Any]] = {}

    def queue(self, method: str, path: str, *outcomes: Any) -> None:
        self._queued.setdefault((method, path), []).extend(outcomes)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and (path is None or r.url.path == path)
        ]

    @staticmethod
    def ok(data: Any) -> httpx.Response:
        """A 200 response carrying ``{"data": data}``."""
        return httpx.Response(200, json={"data": data})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)

        queued = self._queued.get(key)
        if queued:
            outcome = queued.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        if key == ("GET", "/api/tags"):
            return httpx.Response(self.tags_status, json={"data": self.tags})
        return httpx.Response(404, json={"error": {"message": "Not Found"}})


class RecordingSleep:
    """Awaitable replacement for asyncio.sleep that only records delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(float(seconds))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def strapi() -> FakeStrapi:
    """Fresh fake backend for one test."""
    return FakeStrapi()


@pytest.fixture
def sleep() -> RecordingSleep:
    """Retry sleep that returns immediately."""
    return RecordingSleep()


@pytest.fixture
async def strapi_client(strapi: FakeStrapi) -> AsyncGenerator[StrapiClient, None]:
    """StrapiClient wired to the fake backend."""
    client = StrapiClient(
        base_url=BACKEND_URL,
        timeout=5.0,
        transport=httpx.MockTransport(strapi),
    )
    yield client
    await client.close()


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
