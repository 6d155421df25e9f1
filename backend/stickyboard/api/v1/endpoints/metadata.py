from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends

from stickyboard.core.schemas.taxonomy import NoteTaxonomy
from stickyboard.core.services.taxonomy_service import TaxonomyService
from stickyboard.dependencies import get_current_user, get_taxonomy_service

if TYPE_CHECKING:
    from stickyboard.core.schemas.auth import AuthUser


router = APIRouter()


@router.get("/tags", response_model=NoteTaxonomy)
async def get_user_tags(
    board_id: UUID | None = None,
    current_user: AuthUser = Depends(get_current_user),
    service: TaxonomyService = Depends(get_taxonomy_service),
) -> NoteTaxonomy:
    """Return the unique tags used across the user's notes (or one board)."""
    return await service.build_user_note_taxonomy(user_id=current_user.id, board_id=board_id)


@router.get("/colors", response_model=list[str])
async def list_note_colors() -> list[str]:
    """Return the note color palette for client-side pickers."""
    return TaxonomyService.colors()
