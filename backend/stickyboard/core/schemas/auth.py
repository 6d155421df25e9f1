from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from stickyboard.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Caller identity resolved from the bearer token by Supabase Auth."""

    id: UUID
    email: str = ""
    role: str | None = None
