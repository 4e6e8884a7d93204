"""
Tag Creation Service.

Registers a new tag on the content backend with a single request, under
the same retry policy as record submission.
"""

from datetime import datetime
from typing import Any

from newsdesk.core.exceptions import (
    SubmissionAttemptError,
    UnexpectedResponseError,
    ValidationError,
)
from newsdesk.core.utils import iso_timestamp
from newsdesk.schemas.submission import SubmissionOutcome, SubmissionResult
from newsdesk.schemas.tag import TagFormState
from newsdesk.services.base import BaseService
from newsdesk.services.notifications import NotificationCenter

REQUIRED_FIELDS_MESSAGE = "Name is required!"


def build_tag_payload(
    form: TagFormState,
    locale: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Backend document for a new tag."""
    return {
        "data": {
            "name": form.name,
            "count": form.count,
            "description": form.description,
            "publishedAt": iso_timestamp(now),
            "locale": locale,
        }
    }


class TagCreationService(BaseService):
    """Service for the tag form."""

    async def submit(self, form: TagFormState) -> SubmissionResult:
        """
        Submit the tag form.

        Args:
            form: Current tag form values

        Returns:
            Outcome, attempt count, new tag id and the notifications shown
        """
        scope = self.notifier.scope()

        try:
            self._require_credentials(form.pass_phrase_1, form.pass_phrase_2)
            self._validate_required({"name": form.name}, ["name"], REQUIRED_FIELDS_MESSAGE)
        except ValidationError as e:
            return self._rejected(e, scope)

        self._log_operation("Creating tag", name=form.name)
        return await self._submit_with_retry(
            "create_tag",
            lambda: self._attempt(form, scope),
            scope,
        )

    async def _attempt(
        self,
        form: TagFormState,
        notifier: NotificationCenter,
    ) -> SubmissionResult:
        """
        Raises:
            SubmissionAttemptError: Request failed or body unreadable (retried)
            UnexpectedResponseError: Accepted but no id came back (not retried)
        """
        token = self._compose_token(form.pass_phrase_1, form.pass_phrase_2)
        payload = build_tag_payload(form, locale=self.backend.locale)

        response = await self._send(self.client.create_tag(payload, token))
        if response.status_code != 200:
            raise SubmissionAttemptError(
                f"API responded with status {response.status_code}",
                status_code=response.status_code,
            )

        data = self._response_data(response)
        tag_id = data.get("id")
        if not tag_id:
            raise UnexpectedResponseError(
                "Failed to create tag: no id returned", status_code=response.status_code
            )

        # Strapi v4 nests fields under attributes; fall back to what was sent
        attributes = data.get("attributes")
        if not isinstance(attributes, dict):
            attributes = {}
        name = data.get("name") or attributes.get("name") or form.name
        notifier.success(f'Tag "{name}" ({tag_id}) created successfully!')
        return SubmissionResult(outcome=SubmissionOutcome.SUCCESS, tag_id=tag_id)
