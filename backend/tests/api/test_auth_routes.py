"""Auth routes against a fake Supabase auth client.

Invariants:
    - Sign up seeds a default board with welcome notes for regular users
    - The demo account is seeded on sign in and wiped on sign out
    - Sign out always answers 200
    - Repeated sign in attempts from one address are rate limited
"""

from uuid import UUID, uuid4

from stickyboard.config import settings
from stickyboard.core.schemas.auth import AuthUser
from stickyboard.dependencies import get_current_user

SIGNUP = {"email": "bob@example.com", "password": "Secret123", "confirm_password": "Secret123"}


async def test_signup_returns_session_and_seeds_board(client, board_repo, note_repo):
    res = await client.post("/api/v1/auth/signup", json=SIGNUP)

    assert res.status_code == 201
    body = res.json()
    assert body["access_token"]
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "bob@example.com"

    user_id = UUID(body["user"]["id"])
    boards = await board_repo.list_by_user(user_id)
    assert [b.name for b in boards] == ["Main Board"]
    notes = await note_repo.list(user_id=user_id, board_id=boards[0].id)
    assert [n.title for n in notes] == ["Welcome to StickyBoard!", "Getting Started", "Security Features"]


async def test_signup_duplicate_email_conflicts(client):
    await client.post("/api/v1/auth/signup", json=SIGNUP)

    res = await client.post("/api/v1/auth/signup", json=SIGNUP)

    assert res.status_code == 409
    assert res.json()["detail"] == "An account with this email already exists"


async def test_signup_rejects_weak_password(client):
    res = await client.post(
        "/api/v1/auth/signup",
        json={"email": "bob@example.com", "password": "secret1", "confirm_password": "secret1"},
    )

    assert res.status_code == 400
    assert res.json()["detail"] == "Password must contain at least one uppercase letter"


async def test_signup_rejects_mismatched_passwords(client):
    res = await client.post(
        "/api/v1/auth/signup",
        json={"email": "bob@example.com", "password": "Secret123", "confirm_password": "Secret124"},
    )

    assert res.status_code == 400
    assert "Passwords do not match" in res.json()["errors"].values()


async def test_signin_with_wrong_password_is_401(client):
    await client.post("/api/v1/auth/signup", json=SIGNUP)

    res = await client.post("/api/v1/auth/signin", json={"email": SIGNUP["email"], "password": "Wrong123"})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid email or password"


async def test_demo_signin_seeds_workspace_once(client, fake_supabase, board_repo):
    fake_supabase.auth.sign_up({"email": "demo@example.com", "password": "Demo123"})
    credentials = {"email": "demo@example.com", "password": "Demo123"}

    first = await client.post("/api/v1/auth/signin", json=credentials)
    await client.post("/api/v1/auth/signin", json=credentials)

    assert first.status_code == 200
    user_id = UUID(first.json()["user"]["id"])
    assert await board_repo.count_by_user(user_id) == 1


async def test_demo_signout_wipes_workspace(client, app, workspace, board_repo, note_repo):
    demo = AuthUser(id=uuid4(), email="demo@example.com")
    await workspace.seed_default_board(demo.id)
    app.dependency_overrides[get_current_user] = lambda: demo

    res = await client.post("/api/v1/auth/signout")

    assert res.status_code == 200
    assert res.json() == {"message": "Signed out successfully"}
    assert await board_repo.count_by_user(demo.id) == 0
    assert await note_repo.list(user_id=demo.id) == []


async def test_signout_keeps_regular_workspace(client, fake_supabase, board):
    res = await client.post("/api/v1/auth/signout")

    assert res.status_code == 200
    assert fake_supabase.auth.sign_out_calls == 1


async def test_validate_returns_current_user(client, current_user):
    res = await client.get("/api/v1/auth/validate")

    assert res.status_code == 200
    assert res.json() == {"id": str(current_user.id), "email": current_user.email, "role": "authenticated"}


async def test_refresh_with_body_token(client):
    signup = await client.post("/api/v1/auth/signup", json=SIGNUP)

    res = await client.post("/api/v1/auth/refresh", json={"refresh_token": signup.json()["refresh_token"]})

    assert res.status_code == 200
    assert res.json()["user"]["email"] == "bob@example.com"


async def test_refresh_without_token_is_400(client):
    res = await client.post("/api/v1/auth/refresh")

    assert res.status_code == 400
    assert res.json()["detail"] == "Refresh token is required"


async def test_refresh_with_unknown_token_is_400(client):
    res = await client.post("/api/v1/auth/refresh", json={"refresh_token": "nope"})

    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid or expired refresh token"


async def test_missing_bearer_token_is_401(client, app):
    app.dependency_overrides.pop(get_current_user)

    res = await client.get("/api/v1/boards/")

    assert res.status_code == 401
    assert res.json()["detail"] == "Authentication required"


async def test_malformed_bearer_token_is_401(client, app):
    app.dependency_overrides.pop(get_current_user)

    res = await client.get("/api/v1/boards/", headers={"Authorization": "Bearer not-a-jwt"})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token format"


async def test_signin_is_rate_limited(client, monkeypatch):
    monkeypatch.setattr(settings, "enable_rate_limiting", True)
    credentials = {"email": "nobody@example.com", "password": "Wrong123"}

    statuses = [(await client.post("/api/v1/auth/signin", json=credentials)).status_code for _ in range(6)]

    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429
