from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from stickyboard.core.models.note import Note


class NoteRepository(ABC):
    """Storage port for sticky notes.

    Services depend on this interface only; the Supabase implementation is
    wired in by `stickyboard.dependencies` and in-memory fakes by the tests.
    Ownership checks live in the services, not here.
    """

    @abstractmethod
    async def create(self, note: Note) -> Note:  # pragma: no cover - interface only
        """Insert ``note`` and return it as stored."""

    @abstractmethod
    async def create_many(self, notes: Sequence[Note]) -> Sequence[Note]:  # pragma: no cover
        """Insert several notes in one round trip."""

    @abstractmethod
    async def get(self, note_id: UUID) -> Note | None:  # pragma: no cover
        ...

    @abstractmethod
    async def list(self, *, user_id: UUID, board_id: UUID | None = None) -> Sequence[Note]:  # pragma: no cover
        """Return a user's notes, oldest first.

        Args:
            user_id: Owner of the notes
            board_id: Restrict to one board when given
        """

    @abstractmethod
    async def update_fields(self, note_id: UUID, changes: dict) -> Note | None:  # pragma: no cover
        """Apply ``changes`` to the stored note; None when it does not exist."""

    @abstractmethod
    async def delete(self, note_id: UUID) -> bool:  # pragma: no cover
        """Return True when a note was removed."""

    @abstractmethod
    async def delete_by_board(self, board_id: UUID) -> int:  # pragma: no cover
        """Remove every note on a board; returns the number removed."""

    @abstractmethod
    async def delete_by_user(self, user_id: UUID) -> int:  # pragma: no cover
        """Remove every note a user owns; returns the number removed."""
