"""
Notebench Backend — Project Service
=====================================

Projects are owned directly by the authenticated user and are the ownership
root for tasks. Deleting a project deletes its tasks in the same transaction;
tasks are only reachable through their project, so leftovers could never be
read or removed again.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.models.project import Project
from notebench.models.task import Task
from notebench.schemas.project import ProjectResponse
from notebench.services.ownership import OwnedResourceService

logger = logging.getLogger(__name__)


class ProjectService(OwnedResourceService[Project]):
    model = Project
    resource = "project"
    response_schema = ProjectResponse

    async def before_delete(self, db: AsyncSession, record: Project) -> None:
        result = await db.execute(
            delete(Task)
            .where(Task.project_id == record.id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            logger.info("Removing %d tasks of project %s", result.rowcount, record.id)


project_service = ProjectService()
