"""
Use Case: Delete Record

Authorizes the caller and soft-deletes the record with every dependent
record in one transaction. The whole operation is retried when storage
reports a transient write conflict.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.services.cascade_engine import CascadeEngine
from src.app.services.scope_resolver import ScopeResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext
from src.domain.entities import AuditEvent, Operation
from src.domain.errors import DomainError, NotFoundInScope, TransientStorageConflict

from .dtos import DeleteRecordCommand, RecordLifecycleResponse

logger = logging.getLogger(__name__)


class DeleteRecordUseCase:
    """
    Cascade delete a record.

    Business Logic:
    1. Load the active record (absent -> NOT_FOUND)
    2. Authorize delete against the record (out of scope -> NOT_FOUND)
    3. Run the cascade (invariants, edge policies, shared batch id)
    4. Create audit event
    5. Commit; the effects are returned for post-commit delivery

    Nothing is committed when any step fails.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        resolver: Optional[ScopeResolver] = None,
        cascade: Optional[CascadeEngine] = None,
        max_retries: int = 3,
    ):
        self.uow = uow
        self.resolver = resolver or ScopeResolver()
        self.cascade = cascade or CascadeEngine()
        self.max_retries = max(1, max_retries)

    async def execute(
        self, actor: ActorContext, command: DeleteRecordCommand
    ) -> Result[RecordLifecycleResponse]:
        conflict = None
        for attempt in range(1, self.max_retries + 1):
            try:
                return await self._execute_once(actor, command)
            except TransientStorageConflict as exc:
                conflict = exc
                logger.warning(
                    f"Transient conflict deleting {command.resource_type.value} "
                    f"{command.record_id} (attempt {attempt}/{self.max_retries})"
                )
        return Return.err(conflict.error)

    async def _execute_once(
        self, actor: ActorContext, command: DeleteRecordCommand
    ) -> Result[RecordLifecycleResponse]:
        resource_type = command.resource_type

        async with self.uow:
            try:
                # 1. Load record
                record = await self.uow.records.get_by_id(resource_type, command.record_id)
                if record is None:
                    raise NotFoundInScope(resource_type.value)

                # 2. Authorize
                self.resolver.require(actor, resource_type, Operation.delete, record)

                # 3. Cascade
                result = await self.cascade.cascade_delete(
                    resource_type, record, actor, self.uow, command.reassignments
                )

                # 4. Create audit event
                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=actor.tenant_id,
                        actor_id=actor.id,
                        action="record_deleted",
                        resource_type=resource_type.value,
                        resource_id=record.id,
                        deletion_batch_id=result.batch_id,
                        event_metadata={
                            "deleted": [str(i) for i in result.deleted_ids],
                            "reassigned": [str(i) for i in result.reassigned_ids],
                            "reassignments": {
                                str(old): str(new)
                                for old, new in command.reassignments.items()
                            },
                        },
                    )
                )

                # 5. Commit transaction
                await self.uow.commit()
            except TransientStorageConflict:
                raise
            except DomainError as exc:
                return Return.err(exc.error)

        return Return.ok(
            RecordLifecycleResponse(
                resource_type=resource_type,
                record_id=command.record_id,
                batch_id=result.batch_id,
                effects=result.effects,
            )
        )
