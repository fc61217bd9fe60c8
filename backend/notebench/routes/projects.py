"""
Notebench Backend — Project and Task Route Handlers
=====================================================

What:  CRUD for the caller's projects under /api/project, and for the tasks
       nested under each project.
Why:   Tasks are only addressable through their project, so the project's
       ownership check guards every task operation.

Request Flow (task routes):
    bearer token → project load-and-authorize (404 / 403)
                 → task lookup scoped to the project (404)
                 → mutation → JSON
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.database import get_db_session
from notebench.models.user import User
from notebench.schemas.common import DeleteResponse, ErrorResponse
from notebench.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from notebench.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from notebench.security import get_current_user
from notebench.services.project_service import project_service
from notebench.services.task_service import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/project", tags=["Projects"])

_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_RECORD_ERRORS = {
    **_ERRORS,
    403: {"description": "Project belongs to another user", "model": ErrorResponse},
    404: {"description": "Project or task not found", "model": ErrorResponse},
}
_BAD_BODY = {400: {"description": "Invalid fields", "model": ErrorResponse}}


# ══════════════════════════════════════════════════════════════════════════
# Projects
# ══════════════════════════════════════════════════════════════════════════

@router.get("", response_model=List[ProjectResponse], responses=_ERRORS,
            summary="List the caller's projects")
async def list_projects(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[ProjectResponse]:
    return await project_service.list(db, user.id)


@router.get("/{project_id}", response_model=ProjectResponse, responses=_RECORD_ERRORS,
            summary="Get one project")
async def get_project(
    project_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.get(db, project_id, user.id)


@router.post("", status_code=201, response_model=ProjectResponse,
             responses={**_ERRORS, **_BAD_BODY}, summary="Create a project owned by the caller")
async def create_project(
    payload: ProjectCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.create(db, user.id, payload)


@router.put("/{project_id}", response_model=ProjectResponse,
            responses={**_RECORD_ERRORS, **_BAD_BODY}, summary="Replace some fields of a project")
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.update(db, project_id, user.id, payload)


@router.delete("/{project_id}", response_model=DeleteResponse, responses=_RECORD_ERRORS,
               summary="Delete a project and its tasks")
async def delete_project(
    project_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    return await project_service.delete(db, project_id, user.id)


# ══════════════════════════════════════════════════════════════════════════
# Tasks under a project
# ══════════════════════════════════════════════════════════════════════════

@router.get("/{project_id}/tasks", response_model=List[TaskResponse], responses=_RECORD_ERRORS,
            summary="List a project's tasks (empty list when there are none)")
async def list_tasks(
    project_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[TaskResponse]:
    return await task_service.list_for_project(db, project_id, user.id)


@router.post("/{project_id}/tasks", status_code=201, response_model=TaskResponse,
             responses={**_RECORD_ERRORS, **_BAD_BODY}, summary="Add a task to a project")
async def create_task(
    project_id: str,
    payload: TaskCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TaskResponse:
    return await task_service.create_for_project(db, project_id, user.id, payload)


@router.get("/{project_id}/tasks/{task_id}", response_model=TaskResponse,
            responses=_RECORD_ERRORS, summary="Get one task of a project")
async def get_task(
    project_id: str,
    task_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TaskResponse:
    return await task_service.get_for_project(db, project_id, task_id, user.id)


@router.put("/{project_id}/tasks/{task_id}", response_model=TaskResponse,
            responses={**_RECORD_ERRORS, **_BAD_BODY}, summary="Replace some fields of a task")
async def update_task(
    project_id: str,
    task_id: str,
    payload: TaskUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TaskResponse:
    return await task_service.update_for_project(db, project_id, task_id, user.id, payload)


@router.delete("/{project_id}/tasks/{task_id}", response_model=DeleteResponse,
               responses=_RECORD_ERRORS, summary="Delete a task")
async def delete_task(
    project_id: str,
    task_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    return await task_service.delete_for_project(db, project_id, task_id, user.id)
