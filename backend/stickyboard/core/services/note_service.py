from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from stickyboard.core.errors import BoardAccessDeniedError
from stickyboard.core.models.note import Note

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stickyboard.core.repositories.board_repository import BoardRepository
    from stickyboard.core.repositories.note_repository import NoteRepository


class NoteService:
    """Service for managing notes with user-scoped access (RLS friendly)."""

    EDITABLE_FIELDS = frozenset({
        "title",
        "content",
        "position_x",
        "position_y",
        "width",
        "height",
        "color",
        "tags",
        "reminder_at",
        "reminder_triggered",
    })

    def __init__(self, repo: NoteRepository, board_repo: BoardRepository) -> None:
        self._repo = repo
        self._board_repo = board_repo

    async def _require_board(self, board_id: UUID, user_id: UUID) -> None:
        board = await self._board_repo.get(board_id)
        if not board or board.user_id != user_id:
            raise BoardAccessDeniedError()

    async def create_note(self, create_dto, user_id: UUID) -> Note:
        """Create a note on one of the user's boards."""
        await self._require_board(create_dto.board_id, user_id)
        note = Note(
            id=uuid4(),
            board_id=create_dto.board_id,
            user_id=user_id,
            title=create_dto.title,
            content=create_dto.content,
            position_x=create_dto.position_x,
            position_y=create_dto.position_y,
            width=create_dto.width,
            height=create_dto.height,
            color=create_dto.color,
            tags=create_dto.tags or [],
            reminder_at=create_dto.reminder_at,
        )
        return await self._repo.create(note)

    async def get_note(self, note_id: str | UUID, user_id: UUID) -> Note | None:
        """Return note if it exists and belongs to the user; otherwise None."""
        try:
            note_uuid = UUID(str(note_id))
        except ValueError:
            return None
        note = await self._repo.get(note_uuid)
        if note and note.user_id == user_id:
            return note
        return None

    async def list_notes(self, user_id: UUID, board_id: UUID | None = None) -> Sequence[Note]:
        """List the user's notes, optionally restricted to one of their boards."""
        if board_id is not None:
            await self._require_board(board_id, user_id)
        return await self._repo.list(user_id=user_id, board_id=board_id)

    async def notes_by_tag(self, tag: str, user_id: UUID) -> list[Note]:
        """Return the user's notes carrying ``tag`` (exact, case-sensitive)."""
        wanted = (tag or "").strip()
        if not wanted:
            return []
        notes = await self._repo.list(user_id=user_id)
        return [n for n in notes if wanted in n.tags]

    async def replace_note(self, note_id: str | UUID, replace_dto, user_id: UUID) -> Note | None:
        """Overwrite every editable field of a user's note."""
        existing = await self.get_note(note_id, user_id)
        if not existing:
            return None
        changes = replace_dto.model_dump()
        return await self._repo.update_fields(existing.id, self._editable(changes))

    async def update_note(self, note_id: str | UUID, update_dto, user_id: UUID) -> Note | None:
        """Update a user's note with the fields present in the payload.

        A new reminder time re-arms the reminder unless the payload says otherwise.
        """
        existing = await self.get_note(note_id, user_id)
        if not existing:
            return None

        changes = self._editable(update_dto.model_dump(exclude_unset=True))
        if "reminder_at" in changes and "reminder_triggered" not in changes:
            if changes["reminder_at"] != existing.reminder_at:
                changes["reminder_triggered"] = False
        # Explicit nulls clear text and tags; they never clear required geometry
        for key, value in list(changes.items()):
            if value is not None:
                continue
            if key in {"title", "content"}:
                changes[key] = ""
            elif key == "tags":
                changes[key] = []
            elif key in {"position_x", "position_y", "color", "reminder_triggered"}:
                del changes[key]

        return await self._repo.update_fields(existing.id, changes)

    async def delete_note(self, note_id: str | UUID, user_id: UUID) -> bool:
        """Delete a user's note if it exists and belongs to them."""
        note = await self.get_note(note_id, user_id)
        if not note:
            return False
        return await self._repo.delete(note.id)

    def _editable(self, changes: dict) -> dict:
        return {k: v for k, v in changes.items() if k in self.EDITABLE_FIELDS}
