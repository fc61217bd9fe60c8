"""
Notebench Backend — Task Service
==================================

What:  CRUD for tasks nested under a project.
Why:   Tasks have no owner column. Access is decided by the parent project, so
       every operation first authorizes the project, then works inside it.
How:   The project is loaded through project_service.load_authorized (404 if it
       does not exist, 403 if it belongs to someone else). Task reads and
       writes are then scoped by project_id. A task id that exists under a
       different project is reported as not found, never as forbidden.

Listing a project with no tasks returns an empty list, not an error.
"""

import uuid
from typing import Any, List

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.exceptions import NotFoundError
from notebench.models.project import Project
from notebench.models.task import Task
from notebench.schemas.common import DeleteResponse
from notebench.schemas.task import TaskResponse
from notebench.services.ownership import OwnedResourceService
from notebench.services.project_service import ProjectService, project_service


class TaskService(OwnedResourceService[Task]):
    model = Task
    resource = "task"
    response_schema = TaskResponse
    scope_field = "project_id"

    def __init__(self, projects: ProjectService = project_service):
        self.projects = projects

    def deny(self, record_id: uuid.UUID, action: str) -> Exception:
        # The task lives in another project: as far as this project goes, it doesn't exist
        return NotFoundError(resource=self.resource, resource_id=str(record_id))

    async def _project(
        self,
        db: AsyncSession,
        project_id: Any,
        user_id: uuid.UUID,
        action: str = "access",
    ) -> Project:
        return await self.projects.load_authorized(db, project_id, user_id, action=action)

    async def list_for_project(
        self, db: AsyncSession, project_id: Any, user_id: uuid.UUID
    ) -> List[BaseModel]:
        project = await self._project(db, project_id, user_id)
        return await self.list(db, project.id)

    async def create_for_project(
        self, db: AsyncSession, project_id: Any, user_id: uuid.UUID, payload: BaseModel
    ) -> BaseModel:
        project = await self._project(db, project_id, user_id)
        return await self.create(db, project.id, payload)

    async def get_for_project(
        self, db: AsyncSession, project_id: Any, task_id: Any, user_id: uuid.UUID
    ) -> BaseModel:
        project = await self._project(db, project_id, user_id)
        return await self.get(db, task_id, project.id)

    async def update_for_project(
        self,
        db: AsyncSession,
        project_id: Any,
        task_id: Any,
        user_id: uuid.UUID,
        payload: BaseModel,
    ) -> BaseModel:
        project = await self._project(db, project_id, user_id)
        return await self.update(db, task_id, project.id, payload)

    async def delete_for_project(
        self, db: AsyncSession, project_id: Any, task_id: Any, user_id: uuid.UUID
    ) -> DeleteResponse:
        project = await self._project(db, project_id, user_id)
        return await self.delete(db, task_id, project.id)


task_service = TaskService()
