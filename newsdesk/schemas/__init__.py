"""
Schemas.

Pydantic models for form state, backend entities and API envelopes.
"""

from newsdesk.schemas.base import ApiResponse, ErrorDetail, ErrorResponse, ResponseMetadata
from newsdesk.schemas.record import RecordFormState
from newsdesk.schemas.submission import (
    Notification,
    NotificationLevel,
    SubmissionOutcome,
    SubmissionResult,
)
from newsdesk.schemas.tag import Tag, TagFormState, TagResponse

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "Notification",
    "NotificationLevel",
    "RecordFormState",
    "ResponseMetadata",
    "SubmissionOutcome",
    "SubmissionResult",
    "Tag",
    "TagFormState",
    "TagResponse",
]
