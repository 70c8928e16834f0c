"""
Use Case: Get Restore Audit

Lifecycle view of one record for audit and restore screens.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.lifecycle_engine import LifecycleEngine
from src.app.services.scope_resolver import ScopeResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext
from src.domain.entities import Operation, ReadMode, ResourceType
from src.domain.errors import DomainError, NotFoundInScope

from .dtos import AuditEntry, RestoreAuditResponse


class GetRestoreAuditUseCase:
    def __init__(self, uow: UnitOfWork, resolver: Optional[ScopeResolver] = None):
        self.uow = uow
        self.resolver = resolver or ScopeResolver()

    async def execute(
        self, actor: ActorContext, resource_type: ResourceType, record_id: UUID
    ) -> Result[RestoreAuditResponse]:
        async with self.uow:
            try:
                record = await self.uow.records.get_by_id(
                    resource_type, record_id, mode=ReadMode.include_deleted
                )
                if record is None:
                    raise NotFoundInScope(resource_type.value)
                self.resolver.require(actor, resource_type, Operation.delete, record)
            except DomainError as exc:
                return Return.err(exc.error)

            events = await self.uow.audit_events.list_for_resource(
                resource_type.value, record.id
            )
            # Records removed by a parent's cascade only appear in the batch event
            if record.deletion_batch_id is not None:
                known = {event.id for event in events}
                batch_events = await self.uow.audit_events.list_for_batch(
                    record.deletion_batch_id
                )
                events = sorted(
                    events + [event for event in batch_events if event.id not in known],
                    key=lambda event: event.created_at,
                    reverse=True,
                )

            return Return.ok(
                RestoreAuditResponse(
                    resource_type=resource_type,
                    history=[
                        AuditEntry(
                            action=event.action,
                            actor_id=event.actor_id,
                            deletion_batch_id=event.deletion_batch_id,
                            created_at=event.created_at,
                            metadata=event.event_metadata,
                        )
                        for event in events
                    ],
                    **LifecycleEngine.restore_audit(record),
                )
            )
