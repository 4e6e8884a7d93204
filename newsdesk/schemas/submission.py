"""
Submission Schemas.

Outcome of a form submission and the transient notifications it produced.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from newsdesk.core.utils import utc_now


class NotificationLevel(str, Enum):
    """Severity of a transient notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A transient, non-blocking message shown to the user."""

    level: NotificationLevel
    message: str
    timestamp: datetime = Field(default_factory=utc_now)


class SubmissionOutcome(str, Enum):
    """Final state of a submission."""

    SUCCESS = "success"
    MISSING_CREDENTIALS = "missing_credentials"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    LINKING_FAILED = "linking_failed"
    UNEXPECTED_RESPONSE = "unexpected_response"
    FAILED = "failed"


class SubmissionResult(BaseModel):
    """What a submission service reports back to its form."""

    outcome: SubmissionOutcome
    attempts: int = Field(default=0, description="HTTP sequences started")
    record_id: int | str | None = None
    tag_id: int | str | None = None
    error_code: str | None = None
    notifications: list[Notification] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.outcome is SubmissionOutcome.SUCCESS
