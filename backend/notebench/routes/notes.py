"""
Notebench Backend — Notes Route Handlers
==========================================

What:  CRUD for the caller's notes under /api/notes.
Who:   Every handler requires a bearer token (get_current_user).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.database import get_db_session
from notebench.models.user import User
from notebench.schemas.common import DeleteResponse, ErrorResponse
from notebench.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from notebench.security import get_current_user
from notebench.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_RECORD_ERRORS = {
    **_ERRORS,
    403: {"description": "Note belongs to another user", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[NoteResponse],
    responses=_ERRORS,
    summary="List the caller's notes",
)
async def list_notes(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list(db, user.id)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_RECORD_ERRORS,
    summary="Get one note",
)
async def get_note(
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get(db, note_id, user.id)


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses={**_ERRORS, 400: {"description": "Invalid note", "model": ErrorResponse}},
    summary="Create a note owned by the caller",
)
async def create_note(
    payload: NoteCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create(db, user.id, payload)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_RECORD_ERRORS, 400: {"description": "Invalid fields", "model": ErrorResponse}},
    summary="Replace some fields of a note",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update(db, note_id, user.id, payload)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses=_RECORD_ERRORS,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    return await note_service.delete(db, note_id, user.id)
