"""
Tag Schemas.

Pydantic schemas for tags as fetched from the backend and for the tag
creation form.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Tag(BaseModel):
    """A tag from the backend directory."""

    id: int = Field(description="Backend-assigned identifier")
    name: str | None = Field(default=None, description="Display name")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_backend(cls, entry: dict[str, Any]) -> "Tag":
        """
        Build a tag from one element of the backend's ``data`` array.

        Accepts the nested ``{id, attributes: {name}}`` shape as well as a
        flat ``{id, name}`` entry.

        Raises:
            TypeError: If the entry is not a JSON object
        """
        if not isinstance(entry, dict):
            raise TypeError(f"Tag entry is not an object: {entry!r}")
        attributes = entry.get("attributes")
        if isinstance(attributes, dict):
            name = attributes.get("name")
        else:
            name = entry.get("name")
        return cls(id=entry["id"], name=name)


class TagFormState(BaseModel):
    """Values held by the tag creation form while it is mounted."""

    name: str = Field(default="", description="Tag name (required)", examples=["economy"])
    count: int = Field(default=0, description="Initial usage count")
    description: str = Field(default="", description="Free-text description")
    pass_phrase_1: str = Field(default="", description="First secret")
    pass_phrase_2: str = Field(default="", description="Second secret")


class TagResponse(BaseModel):
    """Schema for a tag in API responses."""

    id: int
    name: str | None

    model_config = ConfigDict(from_attributes=True)
