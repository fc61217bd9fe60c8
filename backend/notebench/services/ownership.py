"""
Notebench Backend — Ownership-Checked CRUD
============================================

What:  The single load-and-authorize operation every resource handler composes,
       plus list/create/update/delete built on top of it.
Why:   Every route follows the same shape: fetch by id, check that it exists,
       check ownership, mutate, respond. Writing it once keeps the 404/403
       rules identical across notes, projects and tasks.
How:   `OwnedResourceService` is parameterized by model, resource name,
       response schema and the column holding the owner (the "scope"):

           resource   scope column   scope value
           ────────   ────────────   ───────────────────────────
           note       owner_id       authenticated user's id
           project    owner_id       authenticated user's id
           task       project_id     parent project's id (after the
                                     project itself was authorized)

Check order (get / update / delete):
    1. Load by id           → absent or malformed id: NotFoundError (404)
    2. Compare scope column → mismatch: ForbiddenError (403)
    3. Conditional write filtered by {id, scope}; zero rows → NotFoundError

    Step 3 repeats the ownership filter at write time; if the row changed
    owner between steps 1 and 3, the write matches nothing.
"""

import logging
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Generic, List, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.database import Base
from notebench.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from notebench.models.mixins import utc_now
from notebench.schemas.common import DeleteResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def is_empty(record: Any) -> bool:
    """
    True when a fetched record is absent.

    `None` is empty, and so are empty mappings and sequences, which lets the
    same predicate guard raw query results as well as ORM lookups.
    """
    if record is None:
        return True
    if isinstance(record, (Mapping, Sequence)) and not isinstance(record, (str, bytes)):
        return len(record) == 0
    return False


def parse_id(record_id: Any, resource: str) -> uuid.UUID:
    """
    Coerce a path parameter into a UUID.

    A malformed id cannot name any stored record, so it is reported as
    NotFoundError rather than a validation failure.
    """
    if isinstance(record_id, uuid.UUID):
        return record_id
    try:
        return uuid.UUID(str(record_id))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(record_id))


class OwnedResourceService(Generic[ModelT]):
    """
    CRUD over one model with ownership enforced on every read and write.

    Subclasses set `model`, `resource`, `response_schema` and, when the owner
    is not a user, `scope_field`.
    """

    model: Type[ModelT]
    resource: str = "resource"
    response_schema: Type[BaseModel]
    scope_field: str = "owner_id"

    # ── Ownership predicate ───────────────────────────────────────────────

    @property
    def scope_column(self):
        return getattr(self.model, self.scope_field)

    def is_owned_by(self, record: ModelT, scope: uuid.UUID) -> bool:
        return getattr(record, self.scope_field) == scope

    def deny(self, record_id: uuid.UUID, action: str) -> Exception:
        """Error raised when the record exists but belongs to another scope."""
        return ForbiddenError(resource=self.resource, action=action)

    def to_response(self, record: ModelT) -> BaseModel:
        return self.response_schema.model_validate(record)

    # ── Load-and-authorize ────────────────────────────────────────────────

    async def load_authorized(
        self,
        db: AsyncSession,
        record_id: Any,
        scope: uuid.UUID,
        action: str = "access",
    ) -> ModelT:
        """
        Load a record by id and verify it belongs to `scope`.

        Args:
            db: Request-scoped session
            record_id: Raw id from the URL (str or UUID)
            scope: Value the scope column must equal (caller id or parent id)
            action: Verb used in the 403 message ("see", "update", "delete")

        Raises:
            NotFoundError: No record with this id (→ 404)
            ForbiddenError: Record exists but is owned by someone else (→ 403)
            DatabaseError: Query failed (→ 500)
        """
        rid = parse_id(record_id, self.resource)
        try:
            result = await db.execute(select(self.model).where(self.model.id == rid))
            record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading %s %s: %s", self.resource, rid, str(e))
            raise DatabaseError(
                message=f"Could not retrieve the {self.resource}. Please try again.",
                context={"resource_id": str(rid), "error_type": type(e).__name__},
            )

        if is_empty(record):
            raise NotFoundError(resource=self.resource, resource_id=str(rid))
        if not self.is_owned_by(record, scope):
            logger.info("Denied %s on %s %s", action, self.resource, rid)
            raise self.deny(rid, action)
        return record

    # ── Operations ────────────────────────────────────────────────────────

    async def list(self, db: AsyncSession, scope: uuid.UUID) -> List[BaseModel]:
        """All records in `scope`, oldest first. Unpaginated."""
        try:
            result = await db.execute(
                select(self.model)
                .where(self.scope_column == scope)
                .order_by(self.model.created_at, self.model.id)
            )
            records = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing %ss: %s", self.resource, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not retrieve {self.resource}s. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [self.to_response(r) for r in records]

    async def get(self, db: AsyncSession, record_id: Any, scope: uuid.UUID) -> BaseModel:
        record = await self.load_authorized(db, record_id, scope, action="see")
        return self.to_response(record)

    async def create(
        self,
        db: AsyncSession,
        scope: uuid.UUID,
        payload: BaseModel,
    ) -> BaseModel:
        """
        Persist a new record whose scope column is forced to `scope`.

        The payload schemas carry no owner/project field, and the scope is
        applied last, so a request body can never choose the owner.
        """
        values = payload.model_dump()
        values[self.scope_field] = scope
        record = self.model(**values)

        try:
            db.add(record)
            await db.flush()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Rejected %s create: %s", self.resource, str(e.orig))
            raise ValidationError(message=f"Unable to create {self.resource}")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating %s: %s", self.resource, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not save the {self.resource}. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Created %s %s", self.resource, record.id)
        return self.to_response(record)

    async def update(
        self,
        db: AsyncSession,
        record_id: Any,
        scope: uuid.UUID,
        payload: BaseModel,
    ) -> BaseModel:
        """
        Replace the fields present in `payload` on a record the caller owns.

        Raises:
            NotFoundError / ForbiddenError: from load_authorized, or
                NotFoundError when the conditional write matches no row.
        """
        record = await self.load_authorized(db, record_id, scope, action="update")

        changes = payload.model_dump(exclude_unset=True)
        changes.pop(self.scope_field, None)
        changes["updated_at"] = utc_now()

        try:
            result = await db.execute(
                update(self.model)
                .where(self.model.id == record.id, self.scope_column == scope)
                .values(**changes)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(resource=self.resource, resource_id=str(record.id))
            await db.commit()

            refreshed = await db.execute(
                select(self.model)
                .where(self.model.id == record.id)
                .execution_options(populate_existing=True)
            )
            updated = refreshed.scalar_one_or_none()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Rejected %s update: %s", self.resource, str(e.orig))
            raise ValidationError(message=f"Unable to update {self.resource}")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating %s %s: %s", self.resource, record.id, str(e))
            raise DatabaseError(
                message=f"Could not update the {self.resource}. Please try again.",
                context={"resource_id": str(record.id), "error_type": type(e).__name__},
            )

        if updated is None:
            raise NotFoundError(resource=self.resource, resource_id=str(record.id))
        return self.to_response(updated)

    async def before_delete(self, db: AsyncSession, record: ModelT) -> None:
        """Hook run inside the delete transaction, before the row is removed."""

    async def delete(
        self,
        db: AsyncSession,
        record_id: Any,
        scope: uuid.UUID,
    ) -> DeleteResponse:
        """
        Remove a record the caller owns.

        Deleting the same id twice yields NotFoundError the second time.
        """
        record = await self.load_authorized(db, record_id, scope, action="delete")
        rid = record.id

        try:
            await self.before_delete(db, record)
            result = await db.execute(
                delete(self.model)
                .where(self.model.id == rid, self.scope_column == scope)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(resource=self.resource, resource_id=str(rid))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting %s %s: %s", self.resource, rid, str(e))
            raise DatabaseError(
                message=f"Could not delete the {self.resource}. Please try again.",
                context={"resource_id": str(rid), "error_type": type(e).__name__},
            )

        # Drop the stale instance so later lookups in this session hit the database
        db.expunge(record)
        logger.info("Deleted %s %s", self.resource, rid)
        return DeleteResponse(message=f"{self.resource.capitalize()} deleted", id=rid)

