from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stickyboard.core.models.note import Note
from stickyboard.core.repositories.implementations.supabase.base import SupabaseTable
from stickyboard.core.repositories.note_repository import NoteRepository
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

logger = get_logger(__name__)


class SupabaseNoteRepository(SupabaseTable, NoteRepository):
    """Notes stored in the `notes` table.

    Columns mirror the `Note` fields; `tags` is a text array and
    `board_id` references `boards.id` with RLS limiting rows to their owner.
    """

    TABLE_NAME = "notes"
    READ_ONLY_FIELDS = frozenset({"id", "user_id", "board_id", "created_at", "updated_at"})

    async def create(self, note: Note) -> Note:
        row = note.model_dump(mode="json")
        rows = await self._rows(lambda: self._table().insert(row).execute())
        return self._row_to_note(rows[0] if rows else row)

    async def create_many(self, notes: Sequence[Note]) -> Sequence[Note]:
        if not notes:
            return []
        payload = [n.model_dump(mode="json") for n in notes]
        rows = await self._rows(lambda: self._table().insert(payload).execute())
        return [self._row_to_note(r) for r in rows]

    async def get(self, note_id: UUID) -> Note | None:
        rows = await self._rows(
            lambda: self._table().select("*").eq("id", str(note_id)).limit(1).execute()
        )
        return self._row_to_note(rows[0]) if rows else None

    async def list(self, *, user_id: UUID, board_id: UUID | None = None) -> Sequence[Note]:
        def query():
            q = self._table().select("*").eq("user_id", str(user_id))
            if board_id is not None:
                q = q.eq("board_id", str(board_id))
            return q.order("created_at", desc=False).execute()

        return [self._row_to_note(r) for r in await self._rows(query)]

    async def update_fields(self, note_id: UUID, changes: dict) -> Note | None:
        writable = {k: v for k, v in (changes or {}).items() if k not in self.READ_ONLY_FIELDS}
        if not writable:
            return await self.get(note_id)
        dropped = set(changes) - set(writable)
        if dropped:
            logger.debug("Ignoring read-only note fields", extra={"fields": sorted(dropped)})

        payload = self._jsonable(writable)
        rows = await self._rows(
            lambda: self._table().update(payload).eq("id", str(note_id)).execute()
        )
        return self._row_to_note(rows[0]) if rows else None

    async def delete(self, note_id: UUID) -> bool:
        return await self._delete_where("id", note_id) > 0

    async def delete_by_board(self, board_id: UUID) -> int:
        return await self._delete_where("board_id", board_id)

    async def delete_by_user(self, user_id: UUID) -> int:
        return await self._delete_where("user_id", user_id)

    @staticmethod
    def _row_to_note(row: dict[str, Any]) -> Note:
        # Nullable columns come back as None
        data = dict(row)
        data["tags"] = data.get("tags") or []
        data["reminder_triggered"] = bool(data.get("reminder_triggered"))
        data["title"] = data.get("title") or ""
        data["content"] = data.get("content") or ""
        return Note.model_validate(data)
