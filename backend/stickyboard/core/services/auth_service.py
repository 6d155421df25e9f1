from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from uuid import UUID

from stickyboard.api.v1.schemas.auth import AuthResponse, SignInRequest, SignUpRequest
from stickyboard.core.errors import AccountExistsError, InvalidCredentialsError
from stickyboard.dependencies import rate_limit_by_ip
from stickyboard.utils.logging import get_logger
from stickyboard.utils.validation import validate_password_strength

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request

    from stickyboard.core.schemas.auth import AuthUser
    from stickyboard.core.services.workspace_service import WorkspaceService

logger = get_logger(__name__)

# (substrings of the Supabase error, exception type, message shown to the user)
ErrorRule = tuple[tuple[str, ...], type[Exception], str]

SIGN_UP_ERRORS: tuple[ErrorRule, ...] = (
    (("already registered", "already exists"), AccountExistsError, "An account with this email already exists"),
    (("invalid email",), ValueError, "Invalid email format"),
    (("weak password",), ValueError, "Password does not meet security requirements"),
)
SIGN_IN_ERRORS: tuple[ErrorRule, ...] = (
    (("invalid login credentials", "invalid email or password"), InvalidCredentialsError, "Invalid email or password"),
    (("email not confirmed",), ValueError, "Please confirm your email address before signing in"),
    (("too many requests",), ValueError, "Too many signin attempts. Please try again later."),
)
REFRESH_ERRORS: tuple[ErrorRule, ...] = (
    (("invalid", "expired"), ValueError, "Invalid or expired refresh token"),
)


def translate_auth_error(err: Exception, rules: tuple[ErrorRule, ...], fallback: str) -> Exception:
    """Map a Supabase Auth exception onto the first matching rule."""
    message = str(err).lower()
    for needles, exc_type, text in rules:
        if any(n in message for n in needles):
            return exc_type(text)
    return ValueError(fallback)


class AuthService:
    """Email/password auth on Supabase plus workspace bookkeeping.

    New accounts get a default board; the shared demo account is re-seeded
    on every sign in and emptied on sign out.
    """

    def __init__(self, supabase_client: Any, workspace: WorkspaceService):
        self.supabase = supabase_client
        self.workspace = workspace

    async def _call(
        self,
        operation: str,
        func: Callable[[], Any],
        rules: tuple[ErrorRule, ...],
        fallback: str,
        **log_extra: Any,
    ) -> Any:
        try:
            return await asyncio.to_thread(func)
        except Exception as err:
            logger.warning(
                "%s failed",
                operation,
                extra={**log_extra, "error_type": type(err).__name__, "error_summary": str(err)[:100]},
            )
            raise translate_auth_error(err, rules, fallback) from err

    async def sign_up(self, request: Request, payload: SignUpRequest) -> AuthResponse:
        rate_limit_by_ip(request, "signup")

        ok, problem = validate_password_strength(payload.password)
        if not ok:
            raise ValueError(problem)

        email = payload.email.lower().strip()
        resp = await self._call(
            "Sign up",
            lambda: self.supabase.auth.sign_up({"email": email, "password": payload.password}),
            SIGN_UP_ERRORS,
            "Failed to create account. Please try again.",
            email=email,
        )
        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Account created but session not established. Please confirm your email or sign in.")

        logger.info("User signed up", extra={"user_id": str(resp.user.id)})
        if not self.workspace.is_demo_user(resp.user.email):
            try:
                await self.workspace.seed_default_board(UUID(str(resp.user.id)))
            except Exception:
                logger.exception("Workspace seeding failed", extra={"user_id": str(resp.user.id)})
        return self._to_response(resp)

    async def sign_in(self, request: Request, payload: SignInRequest) -> AuthResponse:
        rate_limit_by_ip(request, "signin")

        email = payload.email.lower().strip()
        if not email or not payload.password:
            raise ValueError("Email and password are required")

        resp = await self._call(
            "Sign in",
            lambda: self.supabase.auth.sign_in_with_password({"email": email, "password": payload.password}),
            SIGN_IN_ERRORS,
            "Authentication service error. Please try again.",
            email=email,
        )
        if not resp.user or not getattr(resp, "session", None):
            raise InvalidCredentialsError("Invalid email or password")

        logger.info("User signed in", extra={"user_id": str(resp.user.id)})
        if self.workspace.is_demo_user(resp.user.email):
            await self.workspace.seed_default_board(UUID(str(resp.user.id)))
        return self._to_response(resp)

    async def sign_out(self, current_user: AuthUser) -> dict[str, str]:
        if self.workspace.is_demo_user(current_user.email):
            await self.workspace.reset_demo_workspace(current_user.id)
        try:
            await asyncio.to_thread(self.supabase.auth.sign_out)
        except Exception as err:
            logger.warning("Supabase sign out failed", extra={"error": str(err), "user_id": str(current_user.id)})
        else:
            logger.info("User signed out", extra={"user_id": str(current_user.id)})
        return {"message": "Signed out successfully"}

    async def refresh_token(self, request: Request, refresh_token: str | None = None) -> AuthResponse:
        """Exchange a refresh token (body first, then bearer header) for a new session."""
        if not refresh_token:
            header = request.headers.get("authorization") or ""
            if header.lower().startswith("bearer "):
                refresh_token = header.split(" ", 1)[1].strip()
        if not refresh_token:
            raise ValueError("Refresh token is required")

        resp = await self._call(
            "Token refresh",
            lambda: self.supabase.auth.refresh_session(refresh_token),
            REFRESH_ERRORS,
            "Failed to refresh token",
        )
        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Invalid refresh token")
        return self._to_response(resp)

    @staticmethod
    def _to_response(resp: Any) -> AuthResponse:
        session = resp.session
        return AuthResponse(
            access_token=session.access_token,
            expires_in=session.expires_in,
            refresh_token=session.refresh_token,
            user={"id": str(resp.user.id), "email": resp.user.email or ""},
        )
