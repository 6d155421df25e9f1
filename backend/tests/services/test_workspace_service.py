"""WorkspaceService: default board seeding and demo reset."""

from uuid import uuid4

from stickyboard.core.services.workspace_service import DEFAULT_NOTES


async def test_seed_creates_board_with_welcome_notes(workspace, board_repo, note_repo):
    user_id = uuid4()

    board = await workspace.seed_default_board(user_id)

    assert board.name == "Main Board"
    notes = await note_repo.list(user_id=user_id, board_id=board.id)
    assert len(notes) == len(DEFAULT_NOTES)
    assert {n.color for n in notes} == {"#fef3c7", "#dbeafe", "#d1fae5"}


async def test_seed_is_idempotent(workspace, board_repo):
    user_id = uuid4()

    await workspace.seed_default_board(user_id)
    second = await workspace.seed_default_board(user_id)

    assert second is None
    assert await board_repo.count_by_user(user_id) == 1


async def test_reset_only_touches_given_user(workspace, board_repo, note_repo):
    demo_id, other_id = uuid4(), uuid4()
    await workspace.seed_default_board(demo_id)
    await workspace.seed_default_board(other_id)

    await workspace.reset_demo_workspace(demo_id)

    assert await board_repo.count_by_user(demo_id) == 0
    assert await note_repo.list(user_id=demo_id) == []
    assert await board_repo.count_by_user(other_id) == 1


def test_demo_email_match_ignores_case(workspace):
    assert workspace.is_demo_user(" Demo@Example.com ")
    assert not workspace.is_demo_user("alice@example.com")
    assert not workspace.is_demo_user(None)
