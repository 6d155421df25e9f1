from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stickyboard.core.models.board import Board
from stickyboard.core.repositories.board_repository import BoardRepository
from stickyboard.core.repositories.implementations.supabase.base import SupabaseTable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseBoardRepository(SupabaseTable, BoardRepository):
    """Boards stored in the `boards` table; RLS restricts rows to their owner."""

    TABLE_NAME = "boards"
    UPDATABLE_FIELDS = frozenset({"name"})

    async def create(self, board: Board) -> Board:
        row = board.model_dump(mode="json")
        rows = await self._rows(lambda: self._table().insert(row).execute())
        return self._row_to_board(rows[0] if rows else row)

    async def get(self, board_id: UUID) -> Board | None:
        rows = await self._rows(
            lambda: self._table().select("*").eq("id", str(board_id)).limit(1).execute()
        )
        return self._row_to_board(rows[0]) if rows else None

    async def get_by_name(self, *, user_id: UUID, name: str) -> Board | None:
        rows = await self._rows(
            lambda: self._table()
            .select("*")
            .eq("user_id", str(user_id))
            .eq("name", name)
            .limit(1)
            .execute()
        )
        return self._row_to_board(rows[0]) if rows else None

    async def list_by_user(self, user_id: UUID) -> Sequence[Board]:
        rows = await self._rows(
            lambda: self._table()
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [self._row_to_board(r) for r in rows]

    async def count_by_user(self, user_id: UUID) -> int:
        resp = await self._run(
            lambda: self._table().select("id", count="exact").eq("user_id", str(user_id)).execute()
        )
        if resp.count is not None:
            return int(resp.count)
        return len(resp.data or [])

    async def update_fields(self, board_id: UUID, changes: dict) -> Board | None:
        allowed = {k: v for k, v in (changes or {}).items() if k in self.UPDATABLE_FIELDS}
        if not allowed:
            return await self.get(board_id)
        rows = await self._rows(
            lambda: self._table().update(allowed).eq("id", str(board_id)).execute()
        )
        return self._row_to_board(rows[0]) if rows else None

    async def delete(self, board_id: UUID) -> bool:
        return await self._delete_where("id", board_id) > 0

    async def delete_by_user(self, user_id: UUID) -> int:
        return await self._delete_where("user_id", user_id)

    @staticmethod
    def _row_to_board(row: dict[str, Any]) -> Board:
        return Board.model_validate(row)
