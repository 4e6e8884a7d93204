"""
Integration Tests for serving the pages under BASE_PATH.

Links rendered into the page and the routes that answer them must agree.
"""

from collections.abc import AsyncIterator

import httpx
import pytest
from httpx import AsyncClient

from newsdesk.core.config import get_settings
from newsdesk.web.dependencies import get_client, get_service_options
from newsdesk.web.main import create_app


@pytest.fixture
async def desk(monkeypatch, strapi_client, sleep) -> AsyncIterator[AsyncClient]:
    monkeypatch.setenv("BASE_PATH", "/desk/")
    get_settings.cache_clear()

    app = create_app()
    app.dependency_overrides[get_client] = lambda: strapi_client
    app.dependency_overrides[get_service_options] = lambda: {"sleep": sleep}

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://newsdesk.test") as http:
        yield http

    get_settings.cache_clear()


class TestBasePath:
    @pytest.mark.asyncio
    async def test_page_links_point_under_prefix(self, desk: AsyncClient):
        response = await desk.get("/desk/")

        assert response.status_code == 200
        assert 'action="/desk/records"' in response.text
        assert 'action="/desk/tags"' in response.text
        assert 'href="/desk/static/app.css"' in response.text

    @pytest.mark.asyncio
    async def test_stylesheet_served_under_prefix(self, desk: AsyncClient):
        response = await desk.get("/desk/static/app.css")

        assert response.status_code == 200
        assert "text/css" in response.headers["content-type"]

    @pytest.mark.asyncio
    async def test_record_post_under_prefix(self, desk: AsyncClient, strapi):
        strapi.queue("POST", "/api/newstreams", strapi.ok({"id": 42}))
        strapi.queue("PUT", "/api/newstreams/42", strapi.ok({"id": 42}))

        response = await desk.post(
            "/desk/records",
            data={"title": "t", "url": "https://example.org/a", "passPhrase1": "a", "passPhrase2": "b"},
        )

        assert response.status_code == 200
        assert "Entry and tags submitted successfully!" in response.text

    @pytest.mark.asyncio
    async def test_tag_post_under_prefix(self, desk: AsyncClient, strapi):
        strapi.queue("POST", "/api/tags", strapi.ok({"id": 9, "name": "fresh"}))

        response = await desk.post(
            "/desk/tags", data={"name": "fresh", "passPhrase1": "a", "passPhrase2": "b"},
        )

        assert response.status_code == 200
        assert "(9) created successfully!" in response.text

    @pytest.mark.asyncio
    async def test_root_no_longer_serves_pages(self, desk: AsyncClient):
        assert (await desk.get("/")).status_code == 404
        assert (await desk.get("/static/app.css")).status_code == 404

    @pytest.mark.asyncio
    async def test_health_stays_at_root(self, desk: AsyncClient):
        assert (await desk.get("/health")).status_code == 200
