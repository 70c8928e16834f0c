"""
Use Case: Get Record

Scoped single-record read. Records outside the caller's scope read exactly
like missing ones.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.scope_resolver import ScopeResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext
from src.domain.entities import Operation, ReadMode, ResourceType
from src.domain.errors import DomainError, NotFoundInScope

from .dtos import RecordResponse


def required_operation(mode: ReadMode) -> Operation:
    """Deleted records are only visible to those who may delete (and restore) them"""
    return Operation.read if mode == ReadMode.active else Operation.delete


class GetRecordUseCase:
    def __init__(self, uow: UnitOfWork, resolver: Optional[ScopeResolver] = None):
        self.uow = uow
        self.resolver = resolver or ScopeResolver()

    async def execute(
        self,
        actor: ActorContext,
        resource_type: ResourceType,
        record_id: UUID,
        mode: ReadMode = ReadMode.active,
    ) -> Result[RecordResponse]:
        async with self.uow:
            try:
                record = await self.uow.records.get_by_id(resource_type, record_id, mode=mode)
                if record is None:
                    raise NotFoundInScope(resource_type.value)

                decision = self.resolver.require(
                    actor, resource_type, required_operation(mode), record
                )
            except DomainError as exc:
                return Return.err(exc.error)

            return Return.ok(
                RecordResponse(
                    resource_type=resource_type,
                    scope=decision.scope,
                    record=record.model_dump(mode="json"),
                )
            )
