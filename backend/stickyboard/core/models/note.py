from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel

DEFAULT_NOTE_COLOR = "#fef3c7"

NOTE_COLORS: tuple[str, ...] = (
    DEFAULT_NOTE_COLOR,  # yellow
    "#dbeafe",  # blue
    "#fce7f3",  # pink
    "#d1fae5",  # green
    "#f3e8ff",  # purple
    "#ffedd5",  # orange
)

DEFAULT_POSITION = 100.0


def normalize_color(value: str | None) -> str:
    """Return the palette entry matching ``value`` (case-insensitive)."""
    if value is None:
        return DEFAULT_NOTE_COLOR
    color = value.strip().lower()
    if color not in NOTE_COLORS:
        raise ValueError(f"Color must be one of: {', '.join(NOTE_COLORS)}")
    return color


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip tags, drop empty ones and remove duplicates.

    Membership is case-sensitive: "Work" and "work" are different tags.
    """
    if not tags:
        return []
    normalized: list[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        stripped = tag.strip()
        if stripped and stripped not in normalized:
            normalized.append(stripped)
    return normalized


class Note(TimestampedModel):
    """Sticky note placed on a board canvas."""

    id: UUID = Field(default_factory=uuid4, description="Unique note identifier")

    title: str = Field(default="", max_length=255, description="Note title")
    content: str = Field(default="", max_length=1000, description="Note content")

    # Canvas geometry
    position_x: float = Field(default=DEFAULT_POSITION, ge=0)
    position_y: float = Field(default=DEFAULT_POSITION, ge=0)
    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)

    color: str = Field(default=DEFAULT_NOTE_COLOR, description="Palette color")
    tags: list[str] = Field(default_factory=list, description="Tags for categorization")

    reminder_at: datetime | None = None
    reminder_triggered: bool = False

    # Ownership
    board_id: UUID
    user_id: UUID

    @field_validator("title", "content", mode="before")
    @classmethod
    def validate_text(cls, v: str | None) -> str:
        return (v or "").strip()

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v: str | None) -> str:
        return normalize_color(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str]:
        return normalize_tags(v)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": str(uuid4()),
                    "title": "Groceries",
                    "content": "Milk, eggs, coffee",
                    "position_x": 120.0,
                    "position_y": 80.0,
                    "width": 250.0,
                    "height": 200.0,
                    "color": "#d1fae5",
                    "tags": ["home"],
                    "board_id": str(uuid4()),
                    "user_id": str(uuid4()),
                }
            ]
        }
    }
