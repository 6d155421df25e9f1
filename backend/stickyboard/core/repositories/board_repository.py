from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from stickyboard.core.models.board import Board


class BoardRepository(ABC):
    """Abstract repository interface for boards."""

    @abstractmethod
    async def create(self, board: Board) -> Board:  # pragma: no cover - interface only
        """Persist a new board and return the stored entity."""

    @abstractmethod
    async def get(self, board_id: UUID) -> Board | None:  # pragma: no cover
        """Fetch a board by id or return None if not found."""

    @abstractmethod
    async def get_by_name(self, *, user_id: UUID, name: str) -> Board | None:  # pragma: no cover
        """Fetch a user's board by exact name."""

    @abstractmethod
    async def list_by_user(self, user_id: UUID) -> Sequence[Board]:  # pragma: no cover
        """Return a user's boards, oldest first."""

    @abstractmethod
    async def count_by_user(self, user_id: UUID) -> int:  # pragma: no cover
        """Return how many boards a user owns."""

    @abstractmethod
    async def update_fields(self, board_id: UUID, changes: dict) -> Board | None:  # pragma: no cover
        """Partially update a board and return it, or None if missing."""

    @abstractmethod
    async def delete(self, board_id: UUID) -> bool:  # pragma: no cover
        """Delete a board by id. Return True if a row was removed."""

    @abstractmethod
    async def delete_by_user(self, user_id: UUID) -> int:  # pragma: no cover
        """Delete every board owned by a user and return how many were removed."""
