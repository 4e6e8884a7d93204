"""
Record Submission Service.

Creates a record on the content backend, then attaches the selected tags
with a second request. The pair is retried as a unit on failure.
"""

from datetime import datetime
from typing import Any

from newsdesk.client.strapi import StrapiClient
from newsdesk.core.exceptions import (
    LinkingFailureError,
    SubmissionAttemptError,
    ValidationError,
)
from newsdesk.core.utils import iso_timestamp
from newsdesk.schemas.record import RecordFormState
from newsdesk.schemas.submission import SubmissionOutcome, SubmissionResult
from newsdesk.services.base import BaseService
from newsdesk.services.notifications import NotificationCenter
from newsdesk.services.tag_directory import TagDirectory

REQUIRED_FIELDS_MESSAGE = "Title and URL are required!"
SUCCESS_MESSAGE = "Entry and tags submitted successfully!"


def build_record_payload(
    form: RecordFormState,
    locale: str,
    marker_tags: list[str],
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Backend document for a new record.

    The body text becomes a single paragraph block; the marker tags are
    prepended to the user's quick-tag string.
    """
    timestamp = iso_timestamp(now)
    return {
        "data": {
            "title": form.title,
            "url": form.url,
            "dateHappened": form.date_happened,
            "content": [
                {
                    "type": "paragraph",
                    "children": [{"text": form.content, "type": "text"}],
                },
            ],
            "meta": {
                "quckTag": ", ".join([*marker_tags, form.auto_tags]),
                "quckComment": form.quck_comment,
            },
            "public": False,
            "createdAt": timestamp,
            "updatedAt": timestamp,
            "publishedAt": timestamp,
            "locale": locale,
        }
    }


def build_link_payload(tag_ids: list[int]) -> dict[str, Any]:
    """Relation update attaching ``tag_ids`` to a record."""
    return {"data": {"tags": {"connect": [{"id": tag_id} for tag_id in tag_ids]}}}


class RecordSubmissionService(BaseService):
    """
    Service for the record form.

    Handles presence checks, the create-then-link request pair and the
    retry policy; reports everything through notifications and a
    SubmissionResult.
    """

    def __init__(
        self,
        client: StrapiClient,
        directory: TagDirectory,
        notifier: NotificationCenter | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(client, notifier, **kwargs)
        self.directory = directory

    def linkable_tags(self, selected: list[int]) -> list[int]:
        """Selected ids still present in the directory, duplicates removed."""
        return [tag_id for tag_id in dict.fromkeys(selected) if self.directory.contains(tag_id)]

    async def submit(self, form: RecordFormState) -> SubmissionResult:
        """
        Submit the record form.

        Args:
            form: Current record form values

        Returns:
            Outcome, attempt count, new record id and the notifications shown
        """
        scope = self.notifier.scope()

        try:
            self._require_credentials(form.pass_phrase_1, form.pass_phrase_2)
            self._validate_required(
                {"title": form.title, "url": form.url},
                ["title", "url"],
                REQUIRED_FIELDS_MESSAGE,
            )
        except ValidationError as e:
            return self._rejected(e, scope)

        self._log_operation("Submitting record", title=form.title, tags=len(form.tags))
        return await self._submit_with_retry(
            "create_record",
            lambda: self._attempt(form, scope),
            scope,
        )

    async def _attempt(
        self,
        form: RecordFormState,
        notifier: NotificationCenter,
    ) -> SubmissionResult:
        """
        One create-then-link sequence.

        Raises:
            SubmissionAttemptError: Create request failed in any way (retried)
            LinkingFailureError: Record exists but tags were not attached
        """
        token = self._compose_token(form.pass_phrase_1, form.pass_phrase_2)
        payload = build_record_payload(
            form,
            locale=self.backend.locale,
            marker_tags=self.backend.marker_tags,
        )

        response = await self._send(self.client.create_record(payload, token))
        if response.status_code != 200:
            raise SubmissionAttemptError(
                f"API responded with status {response.status_code}",
                status_code=response.status_code,
            )

        record_id = self._response_data(response).get("id")
        if record_id is None:
            raise SubmissionAttemptError(
                "Backend response has no record id", status_code=response.status_code
            )

        tag_ids = self.linkable_tags(form.tags)
        self._log_debug("Linking tags", record_id=record_id, tag_ids=tag_ids)

        try:
            link_response = await self._send(
                self.client.link_tags(record_id, build_link_payload(tag_ids), token)
            )
        except SubmissionAttemptError as e:
            raise LinkingFailureError(record_id, reason=e.message) from e

        if not link_response.is_success:
            raise LinkingFailureError(record_id, status_code=link_response.status_code)

        notifier.success(SUCCESS_MESSAGE)
        return SubmissionResult(outcome=SubmissionOutcome.SUCCESS, record_id=record_id)
