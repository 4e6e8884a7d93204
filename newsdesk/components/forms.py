"""
Form Components.

A form component holds its state for as long as it is mounted: the field
values, its own tag directory and selector, and the notifications the page
shows. Mounting fetches the tag list; unmounting detaches the dropdown
listener and makes any in-flight tag fetch a no-op. There is no reset.

Usage:
    form = RecordForm(client, signal)
    await form.mount()
    form.update(title="Rate decision", url="https://example.org/a")
    form.toggle_tag(3)
    result = await form.submit()
    form.unmount()
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from newsdesk.client.strapi import StrapiClient
from newsdesk.components.interaction import OutsideInteractionSignal
from newsdesk.components.tag_selector import TagSelector
from newsdesk.core.logging import get_logger, log_with_source
from newsdesk.schemas.record import RecordFormState
from newsdesk.schemas.submission import SubmissionResult
from newsdesk.schemas.tag import TagFormState
from newsdesk.services.notifications import NotificationCenter
from newsdesk.services.record_submission import RecordSubmissionService
from newsdesk.services.tag_creation import TagCreationService
from newsdesk.services.tag_directory import TagDirectory

logger = get_logger(__name__)


class _FormComponent:
    """Shared mount/unmount lifecycle."""

    region = "form"

    def __init__(
        self,
        client: StrapiClient,
        signal: OutsideInteractionSignal,
        notifier: NotificationCenter | None = None,
        filterable: bool = False,
    ) -> None:
        self.client = client
        self.signal = signal
        self.notifier = notifier or NotificationCenter()
        self.directory = TagDirectory(client, self.notifier)
        self.selector = TagSelector(
            self.directory,
            region=f"{self.region}/tags",
            filterable=filterable,
        )
        self.is_mounted = False

    async def mount(self) -> None:
        self.selector.mount(self.signal)
        self.is_mounted = True
        log_with_source(logger, "forms", "debug", "Form mounted", form=self.region)
        await self.directory.load()

    def unmount(self) -> None:
        self.directory.close()
        self.selector.unmount()
        self.is_mounted = False
        log_with_source(logger, "forms", "debug", "Form unmounted", form=self.region)


class RecordForm(_FormComponent):
    """The record entry form."""

    region = "record-form"

    def __init__(
        self,
        client: StrapiClient,
        signal: OutsideInteractionSignal,
        notifier: NotificationCenter | None = None,
        state: RecordFormState | None = None,
        **service_options: Any,
    ) -> None:
        super().__init__(client, signal, notifier)
        self.state = state or RecordFormState()
        for tag_id in self.state.tags:
            if not self.selector.is_selected(tag_id):
                self.selector.toggle(tag_id)
        self.service = RecordSubmissionService(
            client, self.directory, self.notifier, **service_options
        )

    def update(self, **fields: Any) -> RecordFormState:
        """Apply field edits (everything except the tag selection)."""
        fields.pop("tags", None)
        self.state = self.state.model_copy(update=fields)
        return self.state

    def toggle_tag(self, tag_id: int) -> list[int]:
        selection = self.selector.toggle(tag_id)
        self.state = self.state.model_copy(update={"tags": selection})
        return selection

    async def submit(self) -> SubmissionResult:
        return await self.service.submit(self.state)


class TagForm(_FormComponent):
    """The tag creation form, with a name filter over existing tags."""

    region = "tag-form"

    def __init__(
        self,
        client: StrapiClient,
        signal: OutsideInteractionSignal,
        notifier: NotificationCenter | None = None,
        state: TagFormState | None = None,
        query: str = "",
        **service_options: Any,
    ) -> None:
        super().__init__(client, signal, notifier, filterable=True)
        self.state = state or TagFormState()
        self.selector.set_query(query)
        self.service = TagCreationService(client, self.notifier, **service_options)

    @property
    def query(self) -> str:
        return self.selector.query

    def update(self, **fields: Any) -> TagFormState:
        self.state = self.state.model_copy(update=fields)
        return self.state

    def set_query(self, query: str) -> None:
        self.selector.set_query(query)

    async def submit(self) -> SubmissionResult:
        return await self.service.submit(self.state)


@asynccontextmanager
async def mounted(*forms: _FormComponent) -> AsyncIterator[tuple[_FormComponent, ...]]:
    """Mount ``forms`` (fetching their tag lists concurrently) and unmount on exit."""
    try:
        await asyncio.gather(*(form.mount() for form in forms))
        yield forms
    finally:
        for form in forms:
            form.unmount()
