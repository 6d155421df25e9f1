from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from . import __version__
from .api.error_handlers import register_error_handlers
from .api.middleware.security import SecurityMiddleware
from .api.v1.router import api_router
from .config import settings
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Accept", "Accept-Language", "Authorization", "Content-Type", "X-Requested-With"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "StickyBoard API started",
        extra={"version": __version__, "api_prefix": settings.api_prefix, "max_boards": settings.max_boards_per_user},
    )
    yield
    logger.info("StickyBoard API shutting down")


def _install_middleware(app: FastAPI) -> None:
    # Starlette runs the last added middleware first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        max_age=600,
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityMiddleware)


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="StickyBoard API",
        version=__version__,
        debug=settings.debug,
        root_path=settings.root_path or "",
        lifespan=lifespan,
    )
    _install_middleware(app)
    register_error_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn (``stickyboard-api`` console script)."""
    uvicorn.run(
        "stickyboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        proxy_headers=True,
    )
