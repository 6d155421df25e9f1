from __future__ import annotations

from typing import TYPE_CHECKING

from stickyboard.config import settings
from stickyboard.core.models.board import Board
from stickyboard.core.models.note import Note
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from stickyboard.core.repositories.board_repository import BoardRepository
    from stickyboard.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)


# Notes placed on the first board of every new workspace
DEFAULT_NOTES: tuple[dict, ...] = (
    {
        "title": "Welcome to StickyBoard!",
        "content": "This is a demo note. You can drag me around, edit me, or delete me. Try it out!",
        "position_x": 100.0,
        "position_y": 100.0,
        "width": 385.0,
        "height": 300.0,
        "color": "#fef3c7",
    },
    {
        "title": "Getting Started",
        "content": (
            "1. Manage your boards from the board list\n"
            "2. Create new notes with the + button\n"
            "3. Drag notes to organize\n"
            "4. Resize notes from the bottom right corner\n"
            "5. Use tags to categorize\n"
            "6. Set reminders\n"
            "7. Search by tags or title\n"
            "8. Switch themes with the moon/sun button"
        ),
        "position_x": 530.0,
        "position_y": 150.0,
        "width": 275.0,
        "height": 500.0,
        "color": "#dbeafe",
    },
    {
        "title": "Security Features",
        "content": (
            "This app uses:\n"
            "• Supabase Auth (JWT)\n"
            "• Row level security\n"
            "• Per-user data authorization\n"
            "• Rate limited sign in and sign up"
        ),
        "position_x": 850.0,
        "position_y": 50.0,
        "width": 300.0,
        "height": 350.0,
        "color": "#d1fae5",
    },
)


class WorkspaceService:
    """Seeds and resets user workspaces.

    Every registered user receives a default board with welcome notes once.
    The shared demo account is re-seeded on sign in and wiped on sign out.
    """

    def __init__(
        self,
        board_repo: BoardRepository,
        note_repo: NoteRepository,
        *,
        board_name: str | None = None,
        demo_email: str | None = None,
    ) -> None:
        self._board_repo = board_repo
        self._note_repo = note_repo
        self._board_name = board_name or settings.default_board_name
        self._demo_email = (demo_email or settings.demo_user_email).lower()

    def is_demo_user(self, email: str | None) -> bool:
        return bool(email) and email.strip().lower() == self._demo_email

    async def seed_default_board(self, user_id: UUID) -> Board | None:
        """Create the default board and its notes unless the user already has it."""
        existing = await self._board_repo.get_by_name(user_id=user_id, name=self._board_name)
        if existing:
            logger.info("Default board already present", extra={"user_id": str(user_id)})
            return None

        board = await self._board_repo.create(Board(name=self._board_name, user_id=user_id))
        notes = [Note(board_id=board.id, user_id=user_id, **fields) for fields in DEFAULT_NOTES]
        await self._note_repo.create_many(notes)
        logger.info("Workspace initialized", extra={"user_id": str(user_id), "board_id": str(board.id)})
        return board

    async def reset_demo_workspace(self, user_id: UUID) -> None:
        """Remove every note and board of the demo account."""
        notes_removed = await self._note_repo.delete_by_user(user_id)
        boards_removed = await self._board_repo.delete_by_user(user_id)
        logger.info(
            "Demo workspace cleaned up",
            extra={"notes_removed": notes_removed, "boards_removed": boards_removed},
        )
