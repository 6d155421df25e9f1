from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, Query, status

from stickyboard.api.v1.schemas.note import NoteCreate, NoteRead, NoteReplace, NoteUpdate
from stickyboard.api.v1.schemas.note_search import NoteSearchRequest
from stickyboard.core.errors import BoardAccessDeniedError
from stickyboard.dependencies import (
    get_current_user,
    get_note_service,
    get_search_service,
)

if TYPE_CHECKING:
    from stickyboard.core.schemas.auth import AuthUser
    from stickyboard.core.services.note_service import NoteService
    from stickyboard.core.services.search_service import SearchService

router = APIRouter()


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    board_id: UUID | None = None,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """List the user's notes, optionally for a single board."""
    try:
        notes = await service.list_notes(user_id=current_user.id, board_id=board_id)
    except BoardAccessDeniedError as err:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(err)) from err
    return [NoteRead.model_validate(n) for n in notes]


@router.get("/filter", response_model=list[NoteRead])
async def notes_by_tag(
    tag: str = Query(..., min_length=1),
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    notes = await service.notes_by_tag(tag, user_id=current_user.id)
    return [NoteRead.model_validate(n) for n in notes]


@router.post("/search", response_model=list[NoteRead])
async def search_notes(
    payload: NoteSearchRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
):
    """Search notes for the authenticated user.

    Matches the query against title and content and filters by tags.
    """
    results = await service.search_notes(user_id=current_user.id, request=payload)
    return [NoteRead.model_validate(r) for r in results]


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    try:
        note = await service.create_note(payload, user_id=current_user.id)
    except BoardAccessDeniedError as err:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(err)) from err
    return NoteRead.model_validate(note)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.put("/{note_id}", response_model=NoteRead)
async def replace_note(
    note_id: UUID,
    payload: NoteReplace,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.replace_note(note_id, payload, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.update_note(note_id, payload, user_id=current_user.id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    deleted = await service.delete_note(note_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")
    return None
