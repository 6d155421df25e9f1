from __future__ import annotations

from pydantic import Field

from stickyboard.core.models.base import AppBaseModel


class NoteTaxonomy(AppBaseModel):
    """Tags in use across a user's notes, for the tag filter dropdown."""

    tag_vocab: list[str] = Field(
        default_factory=list,
        description="Sorted unique tags; matching is case-sensitive so 'Work' and 'work' both appear",
    )
