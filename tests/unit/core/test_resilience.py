"""Unit tests for newsdesk.core.resilience."""

from unittest.mock import MagicMock, patch

import pytest

from newsdesk.core.exceptions import LinkingFailureError, SubmissionAttemptError
from newsdesk.core.resilience import fixed_retry, log_retry


class TestLogRetry:
    def test_emits_structured_event(self):
        """log_retry should emit a warning with retry metadata."""
        mock_state = MagicMock()
        mock_state.attempt_number = 2
        mock_state.fn.__name__ = "create_record"
        mock_state.outcome_timestamp = 1000.5
        mock_state.start_time = 1000.0
        mock_state.outcome.failed = True
        mock_state.outcome.exception.return_value = SubmissionAttemptError("503")

        with patch("newsdesk.core.resilience.logger") as mock_logger:
            log_retry(mock_state)
            mock_logger.warning.assert_called_once()
            call_args = mock_logger.warning.call_args
            assert "create_record" in call_args[0][0]
            assert call_args[1]["extra"]["resilience_event"] == "retry_attempt"
            assert call_args[1]["extra"]["duration_ms"] == 500


async def _run(retrying, outcomes):
    """Drive ``retrying`` over a scripted list of exceptions/results."""
    calls = 0
    async for attempt in retrying:
        with attempt:
            outcome = outcomes[calls]
            calls += 1
            if isinstance(outcome, Exception):
                raise outcome
            result = outcome
    return result, calls


class TestFixedRetry:
    async def test_stops_after_max_retries_plus_one(self, sleep):
        """Three retries means four attempts, then the last error surfaces."""
        retrying = fixed_retry(3, 10, sleep=sleep)
        failures = [SubmissionAttemptError(f"fail {n}") for n in range(6)]

        with pytest.raises(SubmissionAttemptError, match="fail 3"):
            await _run(retrying, failures)

        assert sleep.delays == [10, 10, 10]

    async def test_recovers_on_later_attempt(self, sleep):
        retrying = fixed_retry(3, 10, sleep=sleep)
        outcomes = [SubmissionAttemptError("a"), SubmissionAttemptError("b"), "ok"]

        result, calls = await _run(retrying, outcomes)

        assert result == "ok"
        assert calls == 3
        assert sleep.delays == [10, 10]

    async def test_other_errors_are_not_retried(self, sleep):
        retrying = fixed_retry(3, 10, sleep=sleep)

        with pytest.raises(LinkingFailureError):
            await _run(retrying, [LinkingFailureError(42, status_code=500), "ok"])

        assert sleep.delays == []

    async def test_before_sleep_sees_attempt_number(self, sleep):
        seen = []
        retrying = fixed_retry(2, 1, before_sleep=lambda s: seen.append(s.attempt_number), sleep=sleep)

        with pytest.raises(SubmissionAttemptError):
            await _run(retrying, [SubmissionAttemptError("x")] * 3)

        assert seen == [1, 2]

    async def test_zero_retries_means_single_attempt(self, sleep):
        retrying = fixed_retry(0, 10, sleep=sleep)

        with pytest.raises(SubmissionAttemptError):
            await _run(retrying, [SubmissionAttemptError("x"), "ok"])

        assert sleep.delays == []
