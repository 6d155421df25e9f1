from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from stickyboard.core.models.base import AppBaseModel


class BoardCreate(AppBaseModel):
    name: str = Field(..., max_length=100, description="Board name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Board name is required")
        return name


class BoardUpdate(BoardCreate):
    pass


class BoardRead(AppBaseModel):
    id: UUID
    name: str
    user_id: UUID
    created_at: datetime
    updated_at: datetime | None
