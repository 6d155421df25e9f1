"""Note routes: CRUD, board ownership, tag filter and search.

Invariants:
    - Notes can only be placed on, or listed from, the caller's own boards
    - Colors outside the palette are rejected; accepted ones are stored lowercase
    - Tag matching is case-sensitive, text search is not
    - A new reminder time re-arms the reminder
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from stickyboard.core.models.board import Board
from stickyboard.core.models.note import Note


@pytest.fixture
async def seeded_notes(note_repo, board, current_user):
    notes = [
        Note(board_id=board.id, user_id=current_user.id, title="Groceries", content="Milk and eggs", tags=["home"]),
        Note(board_id=board.id, user_id=current_user.id, title="Standup", content="Ship it", tags=["Work", "daily"]),
        Note(board_id=board.id, user_id=current_user.id, title="Retro", content="", tags=["work"]),
    ]
    return [await note_repo.create(n) for n in notes]


async def test_create_note_with_defaults(client, board, current_user):
    res = await client.post("/api/v1/notes/", json={"board_id": str(board.id)})

    assert res.status_code == 201
    body = res.json()
    assert body["title"] == ""
    assert body["content"] == ""
    assert body["color"] == "#fef3c7"
    assert body["position_x"] == 100.0
    assert body["tags"] == []
    assert body["reminder_triggered"] is False
    assert body["user_id"] == str(current_user.id)


async def test_create_note_normalizes_color_and_tags(client, board):
    res = await client.post(
        "/api/v1/notes/",
        json={"board_id": str(board.id), "color": "#DBEAFE", "tags": [" Work ", "Work", "work", ""]},
    )

    assert res.status_code == 201
    assert res.json()["color"] == "#dbeafe"
    assert res.json()["tags"] == ["Work", "work"]


async def test_create_note_rejects_color_outside_palette(client, board):
    res = await client.post("/api/v1/notes/", json={"board_id": str(board.id), "color": "#000000"})

    assert res.status_code == 400
    assert res.json()["errors"]["color"].startswith("Color must be one of")


async def test_create_note_rejects_long_title(client, board):
    res = await client.post("/api/v1/notes/", json={"board_id": str(board.id), "title": "x" * 256})

    assert res.status_code == 400
    assert "title" in res.json()["errors"]


async def test_create_note_on_foreign_board_is_forbidden(client, board_repo):
    foreign = await board_repo.create(Board(name="Theirs", user_id=uuid4()))

    res = await client.post("/api/v1/notes/", json={"board_id": str(foreign.id)})

    assert res.status_code == 403


async def test_list_notes_for_board(client, seeded_notes, board):
    res = await client.get("/api/v1/notes/", params={"board_id": str(board.id)})

    assert res.status_code == 200
    assert [n["title"] for n in res.json()] == ["Groceries", "Standup", "Retro"]


async def test_list_notes_for_foreign_board_is_forbidden(client, board_repo):
    foreign = await board_repo.create(Board(name="Theirs", user_id=uuid4()))

    res = await client.get("/api/v1/notes/", params={"board_id": str(foreign.id)})

    assert res.status_code == 403


async def test_filter_by_tag_is_case_sensitive(client, seeded_notes):
    res = await client.get("/api/v1/notes/filter", params={"tag": "Work"})

    assert res.status_code == 200
    assert [n["title"] for n in res.json()] == ["Standup"]


async def test_search_matches_text_case_insensitively(client, seeded_notes):
    res = await client.post("/api/v1/notes/search", json={"query": "MILK"})

    assert res.status_code == 200
    assert [n["title"] for n in res.json()] == ["Groceries"]


async def test_search_with_all_tags(client, seeded_notes):
    res = await client.post("/api/v1/notes/search", json={"tags": ["Work", "daily"], "match_all_tags": True})

    assert [n["title"] for n in res.json()] == ["Standup"]


async def test_get_missing_note_returns_404(client):
    res = await client.get(f"/api/v1/notes/{uuid4()}")

    assert res.status_code == 404


async def test_replace_note(client, seeded_notes):
    note = seeded_notes[0]
    res = await client.put(
        f"/api/v1/notes/{note.id}",
        json={"title": "Shopping", "content": "Bread", "position_x": 10, "position_y": 20, "color": "#ffedd5"},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Shopping"
    assert body["position_x"] == 10.0
    assert body["color"] == "#ffedd5"
    assert body["tags"] == []


async def test_patch_moves_note_only(client, seeded_notes):
    note = seeded_notes[1]
    res = await client.patch(f"/api/v1/notes/{note.id}", json={"position_x": 300, "position_y": 40})

    assert res.status_code == 200
    body = res.json()
    assert (body["position_x"], body["position_y"]) == (300.0, 40.0)
    assert body["title"] == "Standup"
    assert body["tags"] == ["Work", "daily"]


async def test_patch_rejects_negative_position(client, seeded_notes):
    res = await client.patch(f"/api/v1/notes/{seeded_notes[0].id}", json={"position_x": -5})

    assert res.status_code == 400


async def test_patch_null_title_clears_it(client, seeded_notes):
    res = await client.patch(f"/api/v1/notes/{seeded_notes[0].id}", json={"title": None})

    assert res.status_code == 200
    assert res.json()["title"] == ""


async def test_patch_new_reminder_rearms_it(client, note_repo, board, current_user):
    note = await note_repo.create(
        Note(
            board_id=board.id,
            user_id=current_user.id,
            reminder_at=datetime(2024, 1, 1, tzinfo=UTC),
            reminder_triggered=True,
        )
    )

    res = await client.patch(f"/api/v1/notes/{note.id}", json={"reminder_at": "2030-05-01T09:00:00Z"})

    assert res.status_code == 200
    assert res.json()["reminder_triggered"] is False


async def test_delete_note(client, seeded_notes, note_repo):
    res = await client.delete(f"/api/v1/notes/{seeded_notes[0].id}")

    assert res.status_code == 204
    assert await note_repo.get(seeded_notes[0].id) is None


async def test_delete_foreign_note_returns_404(client, note_repo, board):
    foreign = await note_repo.create(Note(board_id=board.id, user_id=uuid4(), title="Not yours"))

    res = await client.delete(f"/api/v1/notes/{foreign.id}")

    assert res.status_code == 404
    assert await note_repo.get(foreign.id) is not None
