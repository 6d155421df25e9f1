from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from stickyboard.api.v1.schemas.note_search import NoteSearchRequest
    from stickyboard.core.models.note import Note
    from stickyboard.core.repositories.note_repository import NoteRepository


def matches_text(note: Note, query: str | None) -> bool:
    """Case-insensitive substring match against title and content."""
    if not query:
        return True
    needle = query.casefold()
    return needle in (note.title or "").casefold() or needle in (note.content or "").casefold()


def matches_tags(note: Note, tags: Iterable[str] | None, *, match_all: bool = False) -> bool:
    """Tag membership is case-sensitive; ``match_all`` requires every tag."""
    wanted = list(tags or [])
    if not wanted:
        return True
    present = set(note.tags or [])
    if match_all:
        return all(t in present for t in wanted)
    return any(t in present for t in wanted)


class SearchService:
    """Service for searching notes.

    Keeps application logic (validation, defaults) outside transport layer.
    """

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def search_notes(
        self,
        *,
        user_id: UUID,
        request: NoteSearchRequest,
    ) -> Sequence[Note]:
        notes = await self._repo.list(user_id=user_id, board_id=request.board_id)
        results = [
            n for n in notes
            if matches_text(n, request.query)
            and matches_tags(n, request.tags, match_all=request.match_all_tags)
        ]
        return results[: request.limit]
