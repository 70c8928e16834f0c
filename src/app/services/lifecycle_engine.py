"""
Lifecycle Engine

Soft delete and restore of a single record inside the caller's unit of
work. State transitions are decided by the database: the update only
applies while ``is_deleted`` still holds the expected value, so a racing
delete and restore cannot both win.

    ACTIVE --delete--> DELETED --restore--> ACTIVE
    DELETED --ttl expiry--> PURGED
"""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import true

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import ReadMode, ResourceType
from src.domain.errors import LifecycleConflict

logger = logging.getLogger(__name__)


class LifecycleEngine:
    """Stateless; every call receives the unit of work it runs in"""

    @staticmethod
    def visibility_filter(model, mode: ReadMode = ReadMode.active):
        """SQL predicate for a read mode"""
        if mode == ReadMode.active:
            return model.is_deleted == False  # noqa: E712
        if mode == ReadMode.only_deleted:
            return model.is_deleted == True  # noqa: E712
        return true()

    @staticmethod
    def is_visible(record: Any, mode: ReadMode = ReadMode.active) -> bool:
        if mode == ReadMode.active:
            return not record.is_deleted
        if mode == ReadMode.only_deleted:
            return bool(record.is_deleted)
        return True

    async def mark_deleted(
        self,
        resource_type: ResourceType,
        record: Any,
        actor_id: UUID,
        batch_id: UUID,
        uow: UnitOfWork,
    ) -> bool:
        """
        Soft delete a record.

        Idempotent: an already deleted record is left untouched.

        Returns:
            True when this call deleted the record
        """
        if record.is_deleted:
            return False

        applied = await uow.records.transition(
            resource_type,
            record,
            expect_deleted=False,
            values={
                "is_deleted": True,
                "deleted_at": utc_now(),
                "deleted_by": actor_id,
                "deletion_batch_id": batch_id,
                "restored_at": None,
                "restored_by": None,
            },
        )
        if not applied:
            logger.info(f"{resource_type.value} {record.id} was deleted concurrently")
        return applied

    async def restore(
        self,
        resource_type: ResourceType,
        record: Any,
        actor_id: UUID,
        uow: UnitOfWork,
    ) -> Optional[UUID]:
        """
        Restore a soft-deleted record.

        Returns:
            The deletion batch id the record carried

        Raises:
            LifecycleConflict: record is not deleted, or a concurrent
                restore got there first
        """
        if not record.is_deleted:
            raise LifecycleConflict(
                f"{resource_type.value} is not deleted",
                reason="Only deleted records can be restored",
            )

        batch_id = record.deletion_batch_id
        applied = await uow.records.transition(
            resource_type,
            record,
            expect_deleted=True,
            values={
                "is_deleted": False,
                "deleted_at": None,
                "deleted_by": None,
                "deletion_batch_id": None,
                "restored_at": utc_now(),
                "restored_by": actor_id,
                "restore_count": (record.restore_count or 0) + 1,
            },
        )
        if not applied:
            raise LifecycleConflict(
                f"{resource_type.value} was restored concurrently",
                reason="Record is no longer deleted",
            )
        return batch_id

    @staticmethod
    def restore_audit(record: Any) -> dict:
        """Lifecycle bookkeeping of a record"""
        return {
            "id": record.id,
            "is_deleted": record.is_deleted,
            "deleted_at": record.deleted_at,
            "deleted_by": record.deleted_by,
            "restored_at": record.restored_at,
            "restored_by": record.restored_by,
            "restore_count": record.restore_count,
            "deletion_batch_id": record.deletion_batch_id,
            "ttl_seconds": record.ttl_seconds,
        }
