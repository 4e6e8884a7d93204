"""
Unit Tests for TagDirectory.

Fetch on mount, empty list on failure, late responses ignored after unmount.
"""

import asyncio

import httpx
import pytest

from newsdesk.client.strapi import StrapiClient
from newsdesk.schemas.submission import NotificationLevel
from newsdesk.services.notifications import NotificationCenter
from newsdesk.services.tag_directory import LOAD_FAILED_MESSAGE, TagDirectory


@pytest.fixture
def notifier():
    return NotificationCenter()


class TestLoad:
    """Tests for TagDirectory.load."""

    @pytest.mark.asyncio
    async def test_replaces_list_on_success(self, strapi_client, notifier):
        directory = TagDirectory(strapi_client, notifier)

        tags = await directory.load()

        assert [t.id for t in tags] == [1, 2, 3]
        assert directory.names() == ["News", "sport", "Economy"]
        assert directory.contains(2)
        assert directory.get(3).name == "Economy"
        assert notifier.items == []

    @pytest.mark.asyncio
    async def test_accepts_flat_entries(self, strapi, strapi_client, notifier):
        strapi.tags = [{"id": 5, "name": "flat"}, {"id": 6, "attributes": {}}]
        directory = TagDirectory(strapi_client, notifier)

        await directory.load()

        assert directory.names() == ["flat", None]

    @pytest.mark.asyncio
    async def test_failure_leaves_list_empty_and_notifies(self, strapi, strapi_client, notifier):
        strapi.tags_status = 500
        directory = TagDirectory(strapi_client, notifier)

        tags = await directory.load()

        assert tags == []
        assert len(directory) == 0
        assert directory.last_error is not None
        assert [(n.level, n.message) for n in notifier.items] == [
            (NotificationLevel.ERROR, LOAD_FAILED_MESSAGE),
        ]

    @pytest.mark.asyncio
    async def test_transport_error_is_a_load_failure(self, strapi, strapi_client, notifier):
        strapi.queue("GET", "/api/tags", httpx.ConnectError("refused"))
        directory = TagDirectory(strapi_client, notifier)

        assert await directory.load() == []
        assert notifier.items[0].message == LOAD_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_malformed_body_is_a_load_failure(self, strapi, strapi_client, notifier):
        strapi.queue("GET", "/api/tags", httpx.Response(200, json={"items": []}))
        directory = TagDirectory(strapi_client, notifier)

        assert await directory.load() == []
        assert directory.last_error.startswith("Malformed tag list")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entry", [None, "News", 7, ["id", 1]])
    async def test_non_object_entry_is_a_load_failure(self, strapi, strapi_client, notifier, entry):
        strapi.queue("GET", "/api/tags", httpx.Response(200, json={"data": [entry]}))
        directory = TagDirectory(strapi_client, notifier)

        assert await directory.load() == []
        assert directory.last_error.startswith("Malformed tag list")
        assert notifier.items[-1].message == LOAD_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_failure_clears_previous_list(self, strapi, strapi_client, notifier):
        directory = TagDirectory(strapi_client, notifier)
        await directory.load()

        strapi.tags_status = 503
        await directory.load()

        assert directory.tags == []


class TestLateResponses:
    """A response arriving after close() must not touch the directory."""

    @staticmethod
    def _gated_client(release: asyncio.Event, status: int) -> StrapiClient:
        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(status, json={"data": [{"id": 1, "attributes": {"name": "x"}}]})

        return StrapiClient(
            base_url="http://strapi.test",
            timeout=5.0,
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_success_after_close_is_ignored(self, notifier):
        release = asyncio.Event()
        client = self._gated_client(release, 200)
        directory = TagDirectory(client, notifier)

        task = asyncio.create_task(directory.load())
        await asyncio.sleep(0)
        directory.close()
        release.set()
        await task
        await client.close()

        assert directory.closed
        assert directory.tags == []

    @pytest.mark.asyncio
    async def test_failure_after_close_is_silent(self, notifier):
        release = asyncio.Event()
        client = self._gated_client(release, 500)
        directory = TagDirectory(client, notifier)

        task = asyncio.create_task(directory.load())
        await asyncio.sleep(0)
        directory.close()
        release.set()
        await task
        await client.close()

        assert notifier.items == []
        assert directory.last_error is None
