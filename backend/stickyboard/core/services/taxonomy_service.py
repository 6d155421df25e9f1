from __future__ import annotations

from typing import TYPE_CHECKING

from stickyboard.core.models.note import NOTE_COLORS
from stickyboard.core.schemas.taxonomy import NoteTaxonomy

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from stickyboard.core.models.note import Note
    from stickyboard.core.repositories.note_repository import NoteRepository


def collect_tags(notes: Iterable[Note]) -> list[str]:
    """Return the sorted set of tags used by ``notes``."""
    tag_set: set[str] = set()
    for note in notes:
        tag_set.update(note.tags or [])
    return sorted(tag_set)


class TaxonomyService:
    """Aggregates per-user metadata used by filter controls."""

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def build_user_note_taxonomy(self, *, user_id: UUID, board_id: UUID | None = None) -> NoteTaxonomy:
        notes = await self._repo.list(user_id=user_id, board_id=board_id)
        return NoteTaxonomy(tag_vocab=collect_tags(notes))

    @staticmethod
    def colors() -> list[str]:
        return list(NOTE_COLORS)
