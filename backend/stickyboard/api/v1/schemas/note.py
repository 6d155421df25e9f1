from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from stickyboard.core.models.base import AppBaseModel
from stickyboard.core.models.note import (
    DEFAULT_NOTE_COLOR,
    DEFAULT_POSITION,
    normalize_color,
    normalize_tags,
)


class NoteCreate(AppBaseModel):
    board_id: UUID = Field(..., description="Board the note is placed on")
    title: str = Field(default="", max_length=255, description="Note title")
    content: str = Field(default="", max_length=1000, description="Note content")
    position_x: float = Field(default=DEFAULT_POSITION, ge=0)
    position_y: float = Field(default=DEFAULT_POSITION, ge=0)
    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    color: str = Field(default=DEFAULT_NOTE_COLOR, description="Palette color")
    tags: list[str] = Field(default_factory=list, description="Tags for categorization")
    reminder_at: datetime | None = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v: str | None) -> str:
        return (v or "").strip()

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v: str | None) -> str:
        return normalize_color(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str]:
        return normalize_tags(v)


class NoteReplace(AppBaseModel):
    """Full update of a note's editable fields (PUT)."""

    title: str = Field(default="", max_length=255)
    content: str = Field(default="", max_length=1000)
    position_x: float = Field(..., ge=0)
    position_y: float = Field(..., ge=0)
    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    color: str = Field(default=DEFAULT_NOTE_COLOR)
    tags: list[str] = Field(default_factory=list)
    reminder_at: datetime | None = None
    reminder_triggered: bool = False

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v: str | None) -> str:
        return (v or "").strip()

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v: str | None) -> str:
        return normalize_color(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str]:
        return normalize_tags(v)


class NoteUpdate(AppBaseModel):
    """Partial update (PATCH); only fields present in the payload change."""

    title: str | None = Field(default=None, max_length=255)
    content: str | None = Field(default=None, max_length=1000)
    position_x: float | None = Field(default=None, ge=0)
    position_y: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    color: str | None = None
    tags: list[str] | None = None
    reminder_at: datetime | None = None
    reminder_triggered: bool | None = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return normalize_color(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return normalize_tags(v)


class NoteRead(AppBaseModel):
    id: UUID
    board_id: UUID
    user_id: UUID
    title: str
    content: str
    position_x: float
    position_y: float
    width: float | None
    height: float | None
    color: str
    tags: list[str]
    reminder_at: datetime | None
    reminder_triggered: bool
    created_at: datetime
    updated_at: datetime | None
