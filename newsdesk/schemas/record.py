"""
Record Schemas.

Pydantic schema for the record form. Presence of the required fields is
checked by the submission service, not here, so an incomplete form can
still be represented and re-rendered.
"""

from pydantic import BaseModel, Field

from newsdesk.core.utils import iso_timestamp


class RecordFormState(BaseModel):
    """Values held by the record form while it is mounted."""

    title: str = Field(default="", description="Record title (required)")
    url: str = Field(default="", description="Source URL (required)")
    date_happened: str = Field(
        default_factory=iso_timestamp,
        description="When the event happened, ISO-8601",
    )
    content: str = Field(default="", description="Body text, sent as one paragraph")
    auto_tags: str = Field(default="", description="Comma-separated quick tags")
    quck_comment: str = Field(default="", description="Quick comment")
    tags: list[int] = Field(default_factory=list, description="Selected tag ids")
    pass_phrase_1: str = Field(default="", description="First secret")
    pass_phrase_2: str = Field(default="", description="Second secret")
