from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel


class Board(TimestampedModel):
    """Named canvas grouping a user's notes."""

    id: UUID = Field(default_factory=uuid4, description="Unique board identifier")
    name: str = Field(..., min_length=1, max_length=100, description="Board name")
    user_id: UUID = Field(..., description="Owner of the board")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v
