from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from stickyboard.api.v1.schemas.auth import (
    AuthResponse,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
)
from stickyboard.core.errors import AccountExistsError, InvalidCredentialsError
from stickyboard.dependencies import get_auth_service, get_current_user
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from stickyboard.core.schemas.auth import AuthUser

logger = get_logger(__name__)

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        429: {"description": "Too many requests"},
    }
)

SIGNED_OUT = {"message": "Signed out successfully"}


def _server_error(operation: str, err: Exception) -> HTTPException:
    logger.error("Unexpected error during %s", operation, extra={"error": str(err)})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def _bad_request(err: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_up_with_password(
    request: Request,
    payload: SignUpRequest,
    auth_service=Depends(get_auth_service),
):
    """Register, then open a session; new accounts start with a seeded board."""
    try:
        return await auth_service.sign_up(request, payload)
    except HTTPException:
        raise
    except AccountExistsError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except ValueError as err:
        raise _bad_request(err) from err
    except Exception as err:
        raise _server_error("signup", err) from err


@router.post("/signin", response_model=AuthResponse)
async def sign_in_with_password(
    request: Request,
    payload: SignInRequest,
    auth_service=Depends(get_auth_service),
):
    try:
        return await auth_service.sign_in(request, payload)
    except HTTPException:
        raise
    except InvalidCredentialsError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(err),
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    except ValueError as err:
        raise _bad_request(err) from err
    except Exception as err:
        raise _server_error("signin", err) from err


@router.post("/signout")
async def sign_out(
    current_user: AuthUser = Depends(get_current_user),
    auth_service=Depends(get_auth_service),
) -> dict[str, str]:
    """Always reports success; failures are only logged."""
    try:
        return await auth_service.sign_out(current_user)
    except Exception as err:
        logger.error("Sign out cleanup failed", extra={"error": str(err), "user_id": str(current_user.id)})
        return SIGNED_OUT


@router.get("/validate")
async def validate_token(current_user: AuthUser = Depends(get_current_user)) -> dict:
    return {"id": str(current_user.id), "email": current_user.email, "role": current_user.role}


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(
    request: Request,
    payload: RefreshRequest | None = Body(default=None),
    auth_service=Depends(get_auth_service),
):
    try:
        return await auth_service.refresh_token(request, payload.refresh_token if payload else None)
    except ValueError as err:
        raise _bad_request(err) from err
    except Exception as err:
        raise _server_error("token refresh", err) from err
