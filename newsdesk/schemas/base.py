"""
Response Envelope.

Every JSON endpoint answers ``{success, data, error, metadata}``; failed
submissions carry both the SubmissionResult in ``data`` and an ``error``.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from newsdesk.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = Field(default=None, description="X-Request-ID of the call")


class ErrorDetail(BaseModel):
    code: str = Field(description="Stable machine-readable code, e.g. SUB_ATTEMPT_FAILED")
    message: str = Field(description="The message the form would have shown")
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope for JSON endpoint results."""

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Envelope for requests that could not be served at all."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
