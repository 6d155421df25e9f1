from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from stickyboard.config import settings
from stickyboard.core.errors import BoardLimitReachedError
from stickyboard.core.models.board import Board
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stickyboard.core.repositories.board_repository import BoardRepository
    from stickyboard.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)


class BoardService:
    """Service for managing a user's boards."""

    def __init__(
        self,
        repo: BoardRepository,
        note_repo: NoteRepository,
        *,
        max_boards: int | None = None,
    ) -> None:
        self._repo = repo
        self._note_repo = note_repo
        self._max_boards = max_boards if max_boards is not None else settings.max_boards_per_user

    @property
    def max_boards(self) -> int:
        return self._max_boards

    async def list_boards(self, user_id: UUID) -> Sequence[Board]:
        """List the user's boards, oldest first."""
        return await self._repo.list_by_user(user_id)

    async def get_board(self, board_id: str | UUID, user_id: UUID) -> Board | None:
        """Return board if it exists and belongs to the user; otherwise None."""
        try:
            board_uuid = UUID(str(board_id))
        except ValueError:
            return None
        board = await self._repo.get(board_uuid)
        if board and board.user_id == user_id:
            return board
        return None

    async def count_boards(self, user_id: UUID) -> int:
        return await self._repo.count_by_user(user_id)

    async def create_board(self, name: str, user_id: UUID) -> Board:
        """Create a board, refusing once the user owns ``max_boards`` boards."""
        stripped = (name or "").strip()
        if not stripped:
            raise ValueError("Board name is required")

        count = await self._repo.count_by_user(user_id)
        if count >= self._max_boards:
            logger.info("Board limit reached", extra={"user_id": str(user_id), "count": count})
            raise BoardLimitReachedError(self._max_boards)

        return await self._repo.create(Board(name=stripped, user_id=user_id))

    async def rename_board(self, board_id: str | UUID, name: str, user_id: UUID) -> Board | None:
        stripped = (name or "").strip()
        if not stripped:
            raise ValueError("Board name is required")
        board = await self.get_board(board_id, user_id)
        if not board:
            return None
        return await self._repo.update_fields(board.id, {"name": stripped})

    async def delete_board(self, board_id: str | UUID, user_id: UUID) -> bool:
        """Delete a user's board together with every note placed on it."""
        board = await self.get_board(board_id, user_id)
        if not board:
            return False
        removed = await self._note_repo.delete_by_board(board.id)
        logger.info("Deleting board", extra={"board_id": str(board.id), "notes_removed": removed})
        return await self._repo.delete(board.id)
