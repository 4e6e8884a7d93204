"""
Tag Directory.

The list of tags a form offers for selection. Fetched once when the form
mounts; never retried, never cached across forms.
"""

from collections.abc import Iterator

import httpx
from pydantic import ValidationError as PydanticValidationError

from newsdesk.client.strapi import StrapiClient
from newsdesk.core.exceptions import TagDirectoryError
from newsdesk.core.logging import get_logger, log_with_source
from newsdesk.schemas.tag import Tag
from newsdesk.services.notifications import NotificationCenter

logger = get_logger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load tags."


class TagDirectory:
    """
    In-memory tag list owned by one mounted form.

    ``load()`` replaces the list on success and leaves it empty on failure.
    Once ``close()`` has been called (the form unmounted) a response that
    arrives late is ignored entirely.
    """

    def __init__(self, client: StrapiClient, notifier: NotificationCenter) -> None:
        self.client = client
        self.notifier = notifier
        self._tags: list[Tag] = []
        self._by_id: dict[int, Tag] = {}
        self._closed = False
        self.last_error: str | None = None

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def get(self, tag_id: int) -> Tag | None:
        return self._by_id.get(tag_id)

    def contains(self, tag_id: int) -> bool:
        return tag_id in self._by_id

    def names(self) -> list[str | None]:
        return [tag.name for tag in self._tags]

    def replace(self, tags: list[Tag]) -> None:
        self._tags = list(tags)
        self._by_id = {tag.id: tag for tag in self._tags}

    async def load(self) -> list[Tag]:
        """
        Fetch the tag collection and replace the in-memory list.

        Failures leave the list empty and push one error notification.

        Returns:
            The current tag list (unchanged if the owner already unmounted)
        """
        try:
            tags = await self._fetch()
        except TagDirectoryError as e:
            if self._closed:
                log_with_source(logger, "client", "debug", "Ignoring tag failure after unmount")
                return self.tags
            log_with_source(logger, "client", "error", "Error fetching tags", error=e.message)
            self.replace([])
            self.last_error = e.message
            self.notifier.error(LOAD_FAILED_MESSAGE)
            return []

        if self._closed:
            log_with_source(logger, "client", "debug", "Ignoring tag list after unmount")
            return self.tags

        self.replace(tags)
        self.last_error = None
        log_with_source(logger, "client", "info", "Tag list fetched", count=len(tags))
        return self.tags

    async def _fetch(self) -> list[Tag]:
        """
        Raises:
            TagDirectoryError: On transport error, non-2xx status or bad body
        """
        try:
            response = await self.client.list_tags()
        except httpx.HTTPError as e:
            raise TagDirectoryError(f"Failed to fetch tags: {e}") from e

        if not response.is_success:
            raise TagDirectoryError(f"Failed to fetch tags: {response.status_code}")

        try:
            entries = response.json()["data"]
            return [Tag.from_backend(entry) for entry in entries]
        except (ValueError, KeyError, TypeError, PydanticValidationError) as e:
            raise TagDirectoryError(f"Malformed tag list: {e}") from e

    def close(self) -> None:
        """Mark the owning form as unmounted."""
        self._closed = True
