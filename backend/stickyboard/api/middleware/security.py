from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from stickyboard.config import settings
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = get_logger(__name__)


def build_csp(supabase_url: str) -> str:
    """Content-Security-Policy for the board UI: same-origin assets, API calls to us and Supabase."""
    directives = {
        "default-src": "'self'",
        "script-src": "'self'",
        "style-src": "'self' 'unsafe-inline'",
        "img-src": "'self' data:",
        "font-src": "'self' data:",
        "connect-src": f"'self' {supabase_url}".strip(),
        "frame-ancestors": "'none'",
    }
    return "; ".join(f"{name} {value}" for name, value in directives.items()) + ";"


class SecurityMiddleware(BaseHTTPMiddleware):
    """Adds hardening headers to every response and audits auth traffic."""

    STATIC_HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
        "Pragma": "no-cache",
    }

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self._auth_prefix = f"{settings.api_prefix.rstrip('/')}/auth"
        self._csp = build_csp(settings.supabase_url)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers.update(self.STATIC_HEADERS)
        response.headers["Content-Security-Policy"] = self._csp
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        if request.url.path.startswith(self._auth_prefix):
            logger.info(
                "Auth endpoint accessed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status": response.status_code,
                    "ip": request.client.host if request.client else "unknown",
                    "user_agent": request.headers.get("user-agent", "unknown")[:100],
                },
            )

        return response
