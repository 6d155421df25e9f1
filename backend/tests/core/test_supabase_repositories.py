"""Supabase repositories against an in-memory PostgREST query builder.

Invariants:
    - Rows are written as JSON (ids and timestamps as strings)
    - Read-only note columns are never sent in updates
    - Deleting a board's notes leaves other boards untouched
"""

from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from stickyboard.core.models.board import Board
from stickyboard.core.models.note import Note
from stickyboard.core.repositories.implementations.supabase.board_repository import SupabaseBoardRepository
from stickyboard.core.repositories.implementations.supabase.note_repository import SupabaseNoteRepository


class FakeQuery:
    def __init__(self, rows):
        self._rows = rows
        self._op = "select"
        self._payload = None
        self._filters = []
        self._limit = None
        self._order = None
        self._count = None

    def select(self, *_columns, count=None):
        self._count = count
        return self

    def insert(self, payload):
        self._op, self._payload = "insert", payload
        return self

    def update(self, payload):
        self._op, self._payload = "update", payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _matches(self, row):
        return all(str(row.get(c)) == v for c, v in self._filters)

    def execute(self):
        if self._op == "insert":
            new = self._payload if isinstance(self._payload, list) else [self._payload]
            self._rows.extend(dict(r) for r in new)
            return SimpleNamespace(data=[dict(r) for r in new], count=None)
        matched = [r for r in self._rows if self._matches(r)]
        if self._op == "update":
            for row in matched:
                row.update(self._payload)
        elif self._op == "delete":
            self._rows[:] = [r for r in self._rows if not self._matches(r)]
        if self._order:
            column, desc = self._order
            matched.sort(key=lambda r: r[column], reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        count = len(matched) if self._count == "exact" else None
        return SimpleNamespace(data=[dict(r) for r in matched], count=count)


class FakeClient:
    def __init__(self):
        self.tables = {}
        self.updates = []

    def table(self, name):
        rows = self.tables.setdefault(name, [])
        query = FakeQuery(rows)
        original_update = query.update

        def recording_update(payload):
            self.updates.append(payload)
            return original_update(payload)

        query.update = recording_update
        return query


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def notes(fake_client):
    return SupabaseNoteRepository(fake_client)


@pytest.fixture
def boards(fake_client):
    return SupabaseBoardRepository(fake_client)


async def test_note_rows_are_json(notes, fake_client):
    note = Note(board_id=uuid4(), user_id=uuid4(), title="Row", tags=["a"])

    await notes.create(note)

    row = fake_client.tables["notes"][0]
    assert row["id"] == str(note.id)
    assert isinstance(row["created_at"], str)


async def test_update_skips_read_only_columns_and_encodes_dates(notes, fake_client):
    note = await notes.create(Note(board_id=uuid4(), user_id=uuid4()))
    when = datetime(2025, 1, 2, 3, 4, tzinfo=UTC)

    updated = await notes.update_fields(note.id, {"user_id": str(uuid4()), "reminder_at": when, "title": "New"})

    assert fake_client.updates == [{"reminder_at": when.isoformat(), "title": "New"}]
    assert updated.reminder_at == when
    assert updated.user_id == note.user_id


async def test_null_columns_are_defaulted(notes, fake_client):
    note = await notes.create(Note(board_id=uuid4(), user_id=uuid4()))
    fake_client.tables["notes"][0].update({"tags": None, "title": None, "reminder_triggered": None})

    loaded = await notes.get(note.id)

    assert (loaded.tags, loaded.title, loaded.reminder_triggered) == ([], "", False)


async def test_list_and_delete_by_board(notes):
    user_id, keep, drop = uuid4(), uuid4(), uuid4()
    await notes.create_many([
        Note(board_id=keep, user_id=user_id, title="Keep"),
        Note(board_id=drop, user_id=user_id, title="Drop 1"),
        Note(board_id=drop, user_id=user_id, title="Drop 2"),
    ])

    assert await notes.delete_by_board(drop) == 2
    assert [n.title for n in await notes.list(user_id=user_id)] == ["Keep"]
    assert [n.title for n in await notes.list(user_id=user_id, board_id=drop)] == []


async def test_board_count_and_rename(boards, fake_client):
    user_id = uuid4()
    board = await boards.create(Board(name="First", user_id=user_id))
    await boards.create(Board(name="Second", user_id=user_id))

    renamed = await boards.update_fields(board.id, {"name": "Renamed", "user_id": str(uuid4())})

    assert await boards.count_by_user(user_id) == 2
    assert renamed.name == "Renamed"
    assert fake_client.updates == [{"name": "Renamed"}]
    assert (await boards.get_by_name(user_id=user_id, name="Second")) is not None


async def test_delete_missing_board_is_false(boards):
    assert await boards.delete(uuid4()) is False
