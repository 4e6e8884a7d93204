"""
Resilience Infrastructure.

Retry policy and retry callbacks for calls to the content backend.

Submissions use a fixed, bounded policy: after a failed attempt wait a
constant delay and try the whole sequence again, up to ``max_retries``
extra attempts. Only ``SubmissionAttemptError`` is retried; everything
else propagates on the first occurrence.

Usage:
    from newsdesk.core.resilience import fixed_retry

    retrying = fixed_retry(max_retries=3, delay_seconds=10, before_sleep=warn_user)
    async for attempt in retrying:
        with attempt:
            await submit_once()
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from newsdesk.core.exceptions import SubmissionAttemptError
from newsdesk.core.logging import get_logger

logger = get_logger(__name__)

RetryCallback = Callable[[Any], None]


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", "submission")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def fixed_retry(
    max_retries: int,
    delay_seconds: float,
    before_sleep: RetryCallback | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncRetrying:
    """Build the bounded fixed-delay retry policy used by submissions.

    Args:
        max_retries: Extra attempts after the first one
        delay_seconds: Constant wait between attempts (no backoff growth)
        before_sleep: Called with the retry state before each wait
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        Configured AsyncRetrying; re-raises the last error when exhausted
    """

    def _before_sleep(retry_state: Any) -> None:
        log_retry(retry_state)
        if before_sleep is not None:
            before_sleep(retry_state)

    return AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_fixed(delay_seconds),
        retry=retry_if_exception_type(SubmissionAttemptError),
        before_sleep=_before_sleep,
        sleep=sleep,
        reraise=True,
    )
