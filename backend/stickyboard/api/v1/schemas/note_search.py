from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from stickyboard.core.models.base import AppBaseModel
from stickyboard.core.models.note import normalize_tags


class NoteSearchRequest(AppBaseModel):
    query: str | None = Field(default=None, description="Text matched against title and content")
    tags: list[str] | None = None
    match_all_tags: bool = False
    board_id: UUID | None = None
    limit: int = Field(default=50)

    @field_validator("query")
    @classmethod
    def normalize_query(cls, v: str | None) -> str | None:
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return normalize_tags(v) or None

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        return max(1, min(200, v))
