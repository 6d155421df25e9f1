"""View state for the board screen: boards, the open board and its notes."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stickyboard.client.api import ApiError
from stickyboard.core.models.note import DEFAULT_NOTE_COLOR, normalize_color
from stickyboard.core.services.search_service import matches_tags, matches_text
from stickyboard.core.services.taxonomy_service import collect_tags
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from stickyboard.api.v1.schemas.board import BoardRead
    from stickyboard.api.v1.schemas.note import NoteRead
    from stickyboard.client.api import StickyBoardApi
    from stickyboard.client.storage import LocalStore

logger = get_logger(__name__)

MAX_BOARDS = 20
NOTES_KEY = "notes"


class BoardLimitError(Exception):
    def __init__(self, limit: int = MAX_BOARDS) -> None:
        self.limit = limit
        super().__init__(f"Maximum of {limit} boards allowed")


def cascade_position(index: int) -> float:
    """Default canvas offset for the ``index``-th note on a board."""
    return float(50 + (index * 30) % 200)


class BoardViewState:
    """Holds what the board screen shows and keeps it in sync with the API.

    Geometry, color and tag edits are applied locally first and then sent
    to the server; a failed call is logged and the local edit stays.
    Every change to ``notes`` is mirrored to the local store under
    ``notes`` so the reminder poller can see it.
    """

    def __init__(self, api: StickyBoardApi, store: LocalStore, *, max_boards: int = MAX_BOARDS) -> None:
        self._api = api
        self._store = store
        self.max_boards = max_boards

        self.boards: list[BoardRead] = []
        self.current_board: BoardRead | None = None
        self.notes: list[NoteRead] = []
        self.filtered_notes: list[NoteRead] = []
        self.all_tags: list[str] = []
        self.selected_tag: str = ""
        self.search_text: str = ""

    @property
    def can_create_board(self) -> bool:
        return len(self.boards) < self.max_boards

    def _find_board(self, board_id: UUID | str) -> BoardRead | None:
        return next((b for b in self.boards if str(b.id) == str(board_id)), None)

    def _find_note(self, note_id: UUID | str) -> NoteRead | None:
        return next((n for n in self.notes if str(n.id) == str(note_id)), None)

    def _replace_note(self, updated: NoteRead) -> None:
        self.notes = [updated if n.id == updated.id else n for n in self.notes]

    def _notes_changed(self) -> None:
        self.all_tags = collect_tags(self.notes)
        self._apply_filters()
        self._store.set_json(NOTES_KEY, [n.model_dump(mode="json") for n in self.notes])

    def _apply_filters(self) -> None:
        tags = [self.selected_tag] if self.selected_tag else None
        self.filtered_notes = [
            n for n in self.notes
            if matches_tags(n, tags) and matches_text(n, self.search_text.strip())
        ]

    # Boards

    async def load_boards(self) -> list[BoardRead]:
        try:
            self.boards = await self._api.list_boards()
        except ApiError as err:
            logger.error("Failed to load boards", extra={"status": err.status_code, "detail": err.detail})
            return self.boards

        if self.current_board is None or self._find_board(self.current_board.id) is None:
            first = self.boards[0] if self.boards else None
            if first is not None:
                await self.select_board(first.id)
            else:
                self.current_board = None
                self.notes = []
                self._notes_changed()
        return self.boards

    async def select_board(self, board_id: UUID | str) -> BoardRead | None:
        board = self._find_board(board_id)
        if board is None:
            return None
        self.current_board = board
        self.selected_tag = ""
        self.search_text = ""
        await self.load_notes()
        return board

    async def create_board(self, name: str) -> BoardRead | None:
        name = (name or "").strip()
        if not name:
            raise ValueError("Board name is required")
        if not self.can_create_board:
            raise BoardLimitError(self.max_boards)
        try:
            board = await self._api.create_board(name)
        except ApiError as err:
            logger.error("Failed to create board", extra={"status": err.status_code, "detail": err.detail})
            return None
        self.boards.append(board)
        await self.select_board(board.id)
        return board

    async def rename_board(self, board_id: UUID | str, name: str) -> BoardRead | None:
        name = (name or "").strip()
        if not name:
            raise ValueError("Board name is required")
        try:
            board = await self._api.rename_board(board_id, name)
        except ApiError as err:
            logger.error("Failed to rename board", extra={"board_id": str(board_id), "detail": err.detail})
            return None
        self.boards = [board if b.id == board.id else b for b in self.boards]
        if self.current_board is not None and self.current_board.id == board.id:
            self.current_board = board
        return board

    async def delete_board(self, board_id: UUID | str) -> bool:
        try:
            await self._api.delete_board(board_id)
        except ApiError as err:
            logger.error("Failed to delete board", extra={"board_id": str(board_id), "detail": err.detail})
            return False
        self.boards = [b for b in self.boards if str(b.id) != str(board_id)]
        if self.current_board is not None and str(self.current_board.id) == str(board_id):
            self.current_board = None
            if self.boards:
                await self.select_board(self.boards[0].id)
            else:
                self.notes = []
                self._notes_changed()
        return True

    # Notes

    async def load_notes(self) -> list[NoteRead]:
        if self.current_board is None:
            self.notes = []
        else:
            try:
                self.notes = await self._api.list_notes(self.current_board.id)
            except ApiError as err:
                logger.error("Failed to load notes", extra={"status": err.status_code, "detail": err.detail})
                return self.notes
        self._notes_changed()
        return self.notes

    async def add_note(self, **fields: Any) -> NoteRead | None:
        if self.current_board is None:
            raise ValueError("No board selected")
        if "board_id" in fields:
            raise ValueError("Notes are always added to the current board")
        offset = cascade_position(len(self.notes))
        payload: dict[str, Any] = {
            "title": "",
            "content": "",
            "position_x": offset,
            "position_y": offset,
            "color": DEFAULT_NOTE_COLOR,
            "tags": [],
        }
        payload.update(fields)
        try:
            note = await self._api.create_note(self.current_board.id, **payload)
        except ApiError as err:
            logger.error("Failed to create note", extra={"status": err.status_code, "detail": err.detail})
            return None
        self.notes.append(note)
        self._notes_changed()
        return note

    async def update_note(self, note: NoteRead) -> NoteRead | None:
        try:
            updated = await self._api.update_note(note)
        except ApiError as err:
            logger.error("Failed to update note", extra={"note_id": str(note.id), "detail": err.detail})
            return None
        self._replace_note(updated)
        self._notes_changed()
        return updated

    async def delete_note(self, note_id: UUID | str) -> bool:
        try:
            await self._api.delete_note(note_id)
        except ApiError as err:
            logger.error("Failed to delete note", extra={"note_id": str(note_id), "detail": err.detail})
            return False
        self.notes = [n for n in self.notes if str(n.id) != str(note_id)]
        self._notes_changed()
        return True

    async def _persist(self, note: NoteRead, **changes: Any) -> None:
        try:
            updated = await self._api.patch_note(note.id, **changes)
        except ApiError as err:
            logger.error(
                "Failed to save note change",
                extra={"note_id": str(note.id), "fields": sorted(changes), "detail": err.detail},
            )
            return
        self._replace_note(updated)
        self._notes_changed()

    async def move_note(self, note_id: UUID | str, x: float, y: float) -> NoteRead | None:
        note = self._find_note(note_id)
        if note is None:
            return None
        note.position_x = max(0.0, float(x))
        note.position_y = max(0.0, float(y))
        self._notes_changed()
        await self._persist(note, position_x=note.position_x, position_y=note.position_y)
        return self._find_note(note_id)

    async def resize_note(self, note_id: UUID | str, width: float, height: float) -> NoteRead | None:
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")
        note = self._find_note(note_id)
        if note is None:
            return None
        note.width = float(width)
        note.height = float(height)
        self._notes_changed()
        await self._persist(note, width=note.width, height=note.height)
        return self._find_note(note_id)

    async def change_color(self, note_id: UUID | str, color: str) -> NoteRead | None:
        color = normalize_color(color)
        note = self._find_note(note_id)
        if note is None:
            return None
        note.color = color
        self._notes_changed()
        await self._persist(note, color=color)
        return self._find_note(note_id)

    async def add_tag(self, note_id: UUID | str, tag: str) -> bool:
        tag = (tag or "").strip()
        note = self._find_note(note_id)
        if not tag or note is None or tag in note.tags:
            return False
        note.tags = [*note.tags, tag]
        self._notes_changed()
        await self._persist(note, tags=note.tags)
        return True

    async def remove_tag(self, note_id: UUID | str, tag: str) -> bool:
        note = self._find_note(note_id)
        if note is None or tag not in note.tags:
            return False
        note.tags = [t for t in note.tags if t != tag]
        self._notes_changed()
        await self._persist(note, tags=note.tags)
        return True

    # Filters

    def filter_by_tag(self, tag: str) -> list[NoteRead]:
        self.selected_tag = (tag or "").strip()
        self._apply_filters()
        return self.filtered_notes

    def set_search_text(self, text: str) -> list[NoteRead]:
        self.search_text = text or ""
        self._apply_filters()
        return self.filtered_notes

    def clear_filter(self) -> list[NoteRead]:
        self.selected_tag = ""
        self.search_text = ""
        self._apply_filters()
        return self.filtered_notes
