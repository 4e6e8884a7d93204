"""
Base Service.

Base class for the form submission services. Provides the pieces both
forms share: presence checks, bearer token composition, response parsing
and the bounded retry loop that turns failures into notifications.

Usage:
    from newsdesk.services.base import BaseService

    class TagCreationService(BaseService):
        async def submit(self, form: TagFormState) -> SubmissionResult:
            scope = self.notifier.scope()
            ...
            return await self._submit_with_retry(
                "create_tag", lambda: self._attempt(form, scope), scope,
            )
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from newsdesk.client.strapi import StrapiClient
from newsdesk.core.config import get_app_config, get_settings
from newsdesk.core.config_schema import BackendSchema
from newsdesk.core.exceptions import (
    LinkingFailureError,
    MissingCredentialsError,
    MissingRequiredFieldError,
    SubmissionAttemptError,
    UnexpectedResponseError,
    ValidationError,
)
from newsdesk.core.logging import get_logger
from newsdesk.core.resilience import fixed_retry
from newsdesk.schemas.submission import SubmissionOutcome, SubmissionResult
from newsdesk.services.notifications import NotificationCenter

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class BaseService:
    """
    Base class for submission services.

    Provides:
    - Backend client and notification center
    - Bearer token composition from the two pass phrases
    - Presence validation raising typed errors
    - Fixed-delay retry loop with per-attempt notifications

    Subclasses should:
    - Call super().__init__(client, ...) in their __init__
    - Implement a single-attempt coroutine raising SubmissionAttemptError
      for anything worth retrying
    """

    def __init__(
        self,
        client: StrapiClient,
        notifier: NotificationCenter | None = None,
        backend: BackendSchema | None = None,
        token_fragment: str | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize the service.

        Args:
            client: Content backend client
            notifier: Where user-facing messages go (a fresh one if None)
            backend: Backend settings; backend.yaml if None
            token_fragment: Fixed middle part of the token; STRAPI_TOKEN if None
            sleep: Awaitable used for the wait between attempts
        """
        self.client = client
        self.notifier = notifier or NotificationCenter()
        self.backend = backend or get_app_config().backend
        self._token_fragment = (
            token_fragment if token_fragment is not None else get_settings().strapi_token
        )
        self._sleep = sleep
        self._logger = get_logger(self.__class__.__module__)

    @property
    def max_retries(self) -> int:
        return self.backend.retry.max_retries

    @property
    def delay_seconds(self) -> float:
        return self.backend.retry.delay_seconds

    def _compose_token(self, pass_phrase_1: str, pass_phrase_2: str) -> str:
        """
        Build the bearer token the backend expects.

        Plain concatenation of first secret, fixed fragment, second secret.
        Kept only because the backend's API token is provisioned that way.
        """
        return pass_phrase_1 + self._token_fragment + pass_phrase_2

    def _require_credentials(self, pass_phrase_1: str, pass_phrase_2: str) -> None:
        """
        Raises:
            MissingCredentialsError: If either pass phrase is empty
        """
        if not pass_phrase_1 or not pass_phrase_2:
            raise MissingCredentialsError()

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
        message: str,
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Args:
            fields: Dictionary of field names to values
            field_names: List of required field names
            message: User-facing message when something is missing

        Raises:
            MissingRequiredFieldError: If any required field is missing or empty
        """
        missing = [name for name in field_names if not fields.get(name)]
        if missing:
            raise MissingRequiredFieldError(message, missing)

    def _rejected(
        self,
        error: ValidationError,
        notifier: NotificationCenter,
    ) -> SubmissionResult:
        """Turn a failed presence check into a result; nothing was sent."""
        notifier.error(error.message)
        self._log_operation("Submission rejected", code=error.code, **error.details)
        outcome = (
            SubmissionOutcome.MISSING_CREDENTIALS
            if isinstance(error, MissingCredentialsError)
            else SubmissionOutcome.MISSING_REQUIRED_FIELD
        )
        return SubmissionResult(
            outcome=outcome,
            error_code=error.code,
            notifications=notifier.items,
        )

    async def _send(self, request: Awaitable[httpx.Response]) -> httpx.Response:
        """Await a backend call, folding transport errors into one retryable error."""
        try:
            return await request
        except httpx.TimeoutException as e:
            raise SubmissionAttemptError(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise SubmissionAttemptError(f"Request failed: {e}") from e

    def _read_json(self, response: httpx.Response) -> dict[str, Any]:
        """
        Parse a response body as a JSON object.

        Raises:
            SubmissionAttemptError: If the body is not a JSON object
        """
        try:
            body = response.json()
        except ValueError as e:
            raise SubmissionAttemptError(
                "Backend returned invalid JSON", status_code=response.status_code
            ) from e
        if not isinstance(body, dict):
            raise SubmissionAttemptError(
                "Backend returned an unexpected body", status_code=response.status_code
            )
        return body

    def _response_data(self, response: httpx.Response) -> dict[str, Any]:
        """The ``data`` object of a backend response."""
        data = self._read_json(response).get("data")
        if not isinstance(data, dict):
            raise SubmissionAttemptError(
                "Backend response has no data object", status_code=response.status_code
            )
        return data

    async def _submit_with_retry(
        self,
        operation: str,
        attempt: Callable[[], Awaitable[SubmissionResult]],
        notifier: NotificationCenter,
    ) -> SubmissionResult:
        """
        Run ``attempt`` until it succeeds or the retry budget is spent.

        Each failed attempt that will be retried produces one warning; the
        final outcome produces exactly one more message. Errors other than
        SubmissionAttemptError end the loop immediately.
        """
        attempts = 0

        def _announce_retry(retry_state: Any) -> None:
            notifier.warning(
                f"Attempt {retry_state.attempt_number} failed. "
                f"Retrying in {self.delay_seconds:g} seconds..."
            )

        retrying = fixed_retry(
            self.max_retries,
            self.delay_seconds,
            before_sleep=_announce_retry,
            sleep=self._sleep,
        )

        try:
            async for attempt_state in retrying:
                with attempt_state:
                    attempts += 1
                    self._log_debug("Submission attempt", operation=operation, attempt=attempts)
                    result = await attempt()
        except SubmissionAttemptError as e:
            self._logger.error(
                "Submission failed",
                extra={"operation": operation, "attempts": attempts, "error": e.message},
            )
            notifier.error(f"Failed to submit after {self.max_retries} attempts")
            return SubmissionResult(
                outcome=SubmissionOutcome.FAILED,
                attempts=attempts,
                error_code=e.code,
                notifications=notifier.items,
            )
        except LinkingFailureError as e:
            self._logger.error(
                "Tag linking failed",
                extra={"operation": operation, "record_id": e.record_id, "error": e.message},
            )
            notifier.error(e.message)
            return SubmissionResult(
                outcome=SubmissionOutcome.LINKING_FAILED,
                attempts=attempts,
                record_id=e.record_id,
                error_code=e.code,
                notifications=notifier.items,
            )
        except UnexpectedResponseError as e:
            self._logger.error(
                "Unexpected backend response",
                extra={"operation": operation, "error": e.message},
            )
            notifier.error(e.message)
            return SubmissionResult(
                outcome=SubmissionOutcome.UNEXPECTED_RESPONSE,
                attempts=attempts,
                error_code=e.code,
                notifications=notifier.items,
            )

        self._log_operation("Submission succeeded", operation=operation, attempts=attempts)
        return result.model_copy(
            update={"attempts": attempts, "notifications": notifier.items}
        )

    def _log_operation(
        self,
        operation: str,
        /,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
