from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class AppBaseModel(BaseModel):
    """Shared model config: reads ORM-style objects, rejects unknown fields."""

    model_config = ConfigDict(from_attributes=True, extra="forbid", populate_by_name=True)


class TimestampedModel(AppBaseModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None
