from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, status

from stickyboard.api.v1.schemas.board import BoardCreate, BoardRead, BoardUpdate
from stickyboard.core.errors import BoardLimitReachedError
from stickyboard.dependencies import get_board_service, get_current_user

if TYPE_CHECKING:
    from stickyboard.core.schemas.auth import AuthUser
    from stickyboard.core.services.board_service import BoardService

router = APIRouter()


@router.get("/", response_model=list[BoardRead])
async def list_boards(
    current_user: AuthUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    boards = await service.list_boards(current_user.id)
    return [BoardRead.model_validate(b) for b in boards]


@router.get("/count", response_model=int)
async def count_boards(
    current_user: AuthUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return await service.count_boards(current_user.id)


@router.get("/{board_id}", response_model=BoardRead)
async def get_board(
    board_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    board = await service.get_board(board_id, current_user.id)
    if not board:
        raise HTTPException(status_code=404, detail="Board not found")
    return BoardRead.model_validate(board)


@router.post("/", response_model=BoardRead, status_code=status.HTTP_201_CREATED)
async def create_board(
    payload: BoardCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    try:
        board = await service.create_board(payload.name, current_user.id)
    except BoardLimitReachedError as err:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(err)) from err
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return BoardRead.model_validate(board)


@router.put("/{board_id}", response_model=BoardRead)
async def rename_board(
    board_id: UUID,
    payload: BoardUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    try:
        board = await service.rename_board(board_id, payload.name, current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not board:
        raise HTTPException(status_code=404, detail="Board not found")
    return BoardRead.model_validate(board)


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(
    board_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    deleted = await service.delete_board(board_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Board not found")
    return None
