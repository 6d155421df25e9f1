"""Root conftest: fake settings, in-memory repositories and an ASGI test client.

Route tests never reach Supabase: repositories, the auth dependency and the
auth service's Supabase client are all replaced through
``app.dependency_overrides``.
"""

import os

os.environ.setdefault("APP_SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("APP_SUPABASE_ANON_KEY", "test.anon.key")
os.environ.setdefault("APP_SUPABASE_SERVICE_ROLE_KEY", "test.service.key")
os.environ.setdefault("APP_ENABLE_RATE_LIMITING", "false")

from datetime import UTC, datetime  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from stickyboard.core.models.board import Board  # noqa: E402
from stickyboard.core.models.note import Note  # noqa: E402
from stickyboard.core.repositories.board_repository import BoardRepository  # noqa: E402
from stickyboard.core.repositories.note_repository import NoteRepository  # noqa: E402
from stickyboard.core.schemas.auth import AuthUser  # noqa: E402
from stickyboard.core.services.auth_service import AuthService  # noqa: E402
from stickyboard.core.services.workspace_service import WorkspaceService  # noqa: E402
from stickyboard.dependencies import (  # noqa: E402
    get_auth_service,
    get_board_repository,
    get_current_user,
    get_note_repository,
    get_workspace_service,
    reset_rate_limits,
)
from stickyboard.main import app as fastapi_app  # noqa: E402


class InMemoryNoteRepository(NoteRepository):
    def __init__(self):
        self.notes: dict = {}

    async def create(self, note):
        stored = note.model_copy(deep=True)
        self.notes[stored.id] = stored
        return stored.model_copy(deep=True)

    async def create_many(self, notes):
        return [await self.create(n) for n in notes]

    async def get(self, note_id):
        note = self.notes.get(note_id)
        return note.model_copy(deep=True) if note else None

    async def list(self, *, user_id, board_id=None):
        found = [
            n for n in self.notes.values()
            if n.user_id == user_id and (board_id is None or n.board_id == board_id)
        ]
        return [n.model_copy(deep=True) for n in sorted(found, key=lambda n: n.created_at)]

    async def update_fields(self, note_id, changes):
        existing = self.notes.get(note_id)
        if existing is None:
            return None
        data = existing.model_dump()
        data.update(changes)
        data["updated_at"] = datetime.now(UTC)
        updated = Note.model_validate(data)
        self.notes[note_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, note_id):
        return self.notes.pop(note_id, None) is not None

    async def delete_by_board(self, board_id):
        doomed = [k for k, n in self.notes.items() if n.board_id == board_id]
        for key in doomed:
            del self.notes[key]
        return len(doomed)

    async def delete_by_user(self, user_id):
        doomed = [k for k, n in self.notes.items() if n.user_id == user_id]
        for key in doomed:
            del self.notes[key]
        return len(doomed)


class InMemoryBoardRepository(BoardRepository):
    def __init__(self):
        self.boards: dict = {}

    async def create(self, board):
        stored = board.model_copy(deep=True)
        self.boards[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get(self, board_id):
        board = self.boards.get(board_id)
        return board.model_copy(deep=True) if board else None

    async def get_by_name(self, *, user_id, name):
        return next(
            (b.model_copy(deep=True) for b in self.boards.values() if b.user_id == user_id and b.name == name),
            None,
        )

    async def list_by_user(self, user_id):
        found = [b for b in self.boards.values() if b.user_id == user_id]
        return [b.model_copy(deep=True) for b in sorted(found, key=lambda b: b.created_at)]

    async def count_by_user(self, user_id):
        return sum(1 for b in self.boards.values() if b.user_id == user_id)

    async def update_fields(self, board_id, changes):
        existing = self.boards.get(board_id)
        if existing is None:
            return None
        data = existing.model_dump()
        data.update(changes)
        data["updated_at"] = datetime.now(UTC)
        updated = Board.model_validate(data)
        self.boards[board_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, board_id):
        return self.boards.pop(board_id, None) is not None

    async def delete_by_user(self, user_id):
        doomed = [k for k, b in self.boards.items() if b.user_id == user_id]
        for key in doomed:
            del self.boards[key]
        return len(doomed)


class FakeSupabaseAuth:
    """Just enough of ``supabase.auth`` for the auth service."""

    def __init__(self):
        self.accounts: dict[str, dict] = {}
        self.sign_out_calls = 0

    def _session(self, account):
        user = SimpleNamespace(id=account["id"], email=account["email"])
        session = SimpleNamespace(
            access_token=f"header.{account['id']}.signature",
            expires_in=3600,
            refresh_token=f"refresh-{account['id']}",
        )
        return SimpleNamespace(user=user, session=session)

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.accounts:
            raise Exception("User already registered")
        self.accounts[email] = {"id": str(uuid4()), "email": email, "password": credentials["password"]}
        return self._session(self.accounts[email])

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        return self._session(account)

    def sign_out(self):
        self.sign_out_calls += 1

    def refresh_session(self, refresh_token):
        for account in self.accounts.values():
            if refresh_token == f"refresh-{account['id']}":
                return self._session(account)
        raise Exception("Invalid Refresh Token: Refresh Token Not Found")


@pytest.fixture
def note_repo():
    return InMemoryNoteRepository()


@pytest.fixture
def board_repo():
    return InMemoryBoardRepository()


@pytest.fixture
def current_user():
    return AuthUser(id=uuid4(), email="alice@example.com", role="authenticated")


@pytest.fixture
def fake_supabase():
    return SimpleNamespace(auth=FakeSupabaseAuth())


@pytest.fixture
def workspace(board_repo, note_repo):
    return WorkspaceService(board_repo, note_repo, board_name="Main Board", demo_email="demo@example.com")


@pytest.fixture
async def board(board_repo, current_user):
    return await board_repo.create(Board(name="Work", user_id=current_user.id))


@pytest.fixture
def app(note_repo, board_repo, current_user, fake_supabase, workspace):
    """FastAPI app with every Supabase-backed dependency overridden."""
    reset_rate_limits()
    fastapi_app.dependency_overrides[get_note_repository] = lambda: note_repo
    fastapi_app.dependency_overrides[get_board_repository] = lambda: board_repo
    fastapi_app.dependency_overrides[get_current_user] = lambda: current_user
    fastapi_app.dependency_overrides[get_workspace_service] = lambda: workspace
    fastapi_app.dependency_overrides[get_auth_service] = lambda: AuthService(fake_supabase, workspace)
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
