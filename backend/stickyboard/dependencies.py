from __future__ import annotations

import asyncio
import math
import time
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stickyboard.config import settings
from stickyboard.core.repositories.implementations.supabase.board_repository import (
    SupabaseBoardRepository,
)
from stickyboard.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from stickyboard.core.schemas.auth import AuthUser
from stickyboard.core.services.board_service import BoardService
from stickyboard.core.services.note_service import NoteService
from stickyboard.core.services.search_service import SearchService
from stickyboard.core.services.taxonomy_service import TaxonomyService
from stickyboard.core.services.workspace_service import WorkspaceService
from stickyboard.db.base import create_request_supabase_client, get_supabase_admin_client
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from supabase import Client

    from stickyboard.core.repositories.board_repository import BoardRepository
    from stickyboard.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)

# Missing tokens are reported by get_current_user, not by the scheme
http_bearer = HTTPBearer(auto_error=False)


class AttemptLimiter:
    """Sliding-window attempt counter kept in process memory."""

    def __init__(self) -> None:
        self._attempts: dict[str, list[float]] = {}

    def _recent(self, key: str, now: float) -> list[float]:
        window_start = now - settings.login_attempt_window
        recent = [ts for ts in self._attempts.get(key, []) if ts > window_start]
        self._attempts[key] = recent
        return recent

    def hit(self, key: str) -> int | None:
        """Record an attempt; return seconds until reset if ``key`` is over the limit."""
        if not settings.enable_rate_limiting:
            return None
        now = time.time()
        recent = self._recent(key, now)
        if len(recent) >= settings.max_login_attempts:
            return max(1, math.ceil(settings.login_attempt_window - (now - min(recent))))
        recent.append(now)
        return None

    def clear(self) -> None:
        self._attempts.clear()


_limiter = AttemptLimiter()


def reset_rate_limits() -> None:
    _limiter.clear()


def rate_limit_by_ip(request: Request, operation: str = "default") -> None:
    """Raise 429 once a client address exceeds the attempt budget for ``operation``.

    Args:
        request: Incoming request, used for the client address
        operation: Bucket name, e.g. "signin" or "signup"
    """
    client_ip = request.client.host if request.client else "unknown"
    retry_after = _limiter.hit(f"{operation}:{client_ip}")
    if retry_after is None:
        return

    logger.warning("Rate limited %s attempt", operation, extra={"ip": client_ip})
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Too many {operation} attempts. Please try again later.",
        headers={
            "Retry-After": str(retry_after),
            "RateLimit-Limit": str(settings.max_login_attempts),
            "RateLimit-Remaining": "0",
            "RateLimit-Reset": str(retry_after),
        },
    )


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization")
    if header and header.lower().startswith("bearer "):
        return header.split(" ", 1)[1].strip() or None
    return None


def get_request_supabase_client(request: Request) -> Client:
    """Supabase client carrying the caller's JWT so `boards`/`notes` RLS applies."""
    return create_request_supabase_client(_bearer_token(request))


def get_note_repository(client: Client = Depends(get_request_supabase_client)) -> NoteRepository:
    return SupabaseNoteRepository(client)


def get_board_repository(client: Client = Depends(get_request_supabase_client)) -> BoardRepository:
    return SupabaseBoardRepository(client)


def get_note_service(
    repo: NoteRepository = Depends(get_note_repository),
    board_repo: BoardRepository = Depends(get_board_repository),
) -> NoteService:
    return NoteService(repo, board_repo)


def get_board_service(
    repo: BoardRepository = Depends(get_board_repository),
    note_repo: NoteRepository = Depends(get_note_repository),
) -> BoardService:
    return BoardService(repo, note_repo)


def get_search_service(repo: NoteRepository = Depends(get_note_repository)) -> SearchService:
    return SearchService(repo)


def get_taxonomy_service(repo: NoteRepository = Depends(get_note_repository)) -> TaxonomyService:
    return TaxonomyService(repo)


def get_workspace_service() -> WorkspaceService:
    """Workspace seeding runs outside the user's RLS scope (right after sign up)."""
    admin = get_supabase_admin_client()
    return WorkspaceService(SupabaseBoardRepository(admin), SupabaseNoteRepository(admin))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> AuthUser:
    """Resolve the bearer JWT to a user through Supabase Auth."""
    if not credentials:
        raise _unauthorized("Authentication required")
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise _unauthorized("Invalid token format")

    supabase = create_request_supabase_client(jwt)
    try:
        resp = await asyncio.to_thread(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] or "Unknown error",
                "jwt_length": len(jwt),
            },
        )
        if "invalid" in error_msg or "expired" in error_msg:
            raise _unauthorized("Token is invalid or expired") from err
        raise _unauthorized("Authentication failed") from err

    user = getattr(resp, "user", None)
    if not user or not getattr(user, "id", None):
        raise _unauthorized("Invalid user data")
    return AuthUser(id=user.id, email=getattr(user, "email", None) or "", role=getattr(user, "role", None))


def get_auth_service(
    client: Client = Depends(get_request_supabase_client),
    workspace: WorkspaceService = Depends(get_workspace_service),
):
    from stickyboard.core.services.auth_service import AuthService

    return AuthService(client, workspace)
