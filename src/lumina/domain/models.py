from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

PhotoSource = Literal["upload", "generated", "sample"]


class Photo(BaseModel):
    """A gallery entry. Immutable once created."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str
    url: str
    title: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: int = Field(alias="createdAt")
    source: PhotoSource
    width: int | None = None
    height: int | None = None

    @field_validator("id", "url")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("photo id and url must not be empty")
        return value

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on tags or description.

        ``needle`` must already be lower-cased.
        """
        if any(needle in tag.lower() for tag in self.tags):
            return True
        return self.description is not None and needle in self.description.lower()

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str
    tags: list[str]


PHOTO_LIST_ADAPTER = TypeAdapter(list[Photo])
