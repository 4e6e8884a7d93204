"""
Integration fixtures: the whole app, in-process.

``client`` drives create_app() through httpx.ASGITransport. The backend
client dependency is swapped for one talking to FakeStrapi and the
submission services get RecordingSleep, so retry tests finish instantly.
"""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from newsdesk.web.dependencies import get_client, get_service_options
from newsdesk.web.main import create_app


@pytest.fixture
async def client(strapi_client, sleep) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app()
    app.dependency_overrides[get_client] = lambda: strapi_client
    app.dependency_overrides[get_service_options] = lambda: {"sleep": sleep}

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://newsdesk.test") as http:
        yield http


class Envelope:
    """Checks on the {success, data, error, metadata} JSON envelope."""

    @staticmethod
    def _body(response: httpx.Response, status: int) -> dict[str, Any]:
        assert response.status_code == status, f"{response.status_code}: {response.text}"
        return response.json()

    def assert_success(self, response: httpx.Response, status: int = 200) -> dict[str, Any]:
        body = self._body(response, status)
        assert body["success"] is True, body
        assert body["error"] is None, body
        return body

    def assert_error(
        self, response: httpx.Response, status: int, code: str | None = None
    ) -> dict[str, Any]:
        body = self._body(response, status)
        assert body["success"] is False, body
        assert body["error"], body
        if code is not None:
            assert body["error"]["code"] == code, body["error"]
        return body


@pytest.fixture
def api() -> Envelope:
    return Envelope()
