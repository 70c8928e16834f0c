"""
Use Case: List Records

Paginated list restricted to the caller's scope. The scope predicate always
comes from the authorization matrix, never from the request.
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.scope_resolver import ScopeResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext
from src.domain.entities import ReadMode, ResourceType
from src.domain.errors import DomainError

from .dtos import RecordListResponse
from .get_record_use_case import required_operation


class ListRecordsUseCase:
    def __init__(self, uow: UnitOfWork, resolver: Optional[ScopeResolver] = None):
        self.uow = uow
        self.resolver = resolver or ScopeResolver()

    async def execute(
        self,
        actor: ActorContext,
        resource_type: ResourceType,
        mode: ReadMode = ReadMode.active,
        limit: int = 10,
        offset: int = 0,
    ) -> Result[RecordListResponse]:
        operation = required_operation(mode)

        async with self.uow:
            try:
                decision = self.resolver.require(actor, resource_type, operation)
                scope_filter = self.resolver.build_list_filter(actor, resource_type, operation)
            except DomainError as exc:
                return Return.err(exc.error)

            records = await self.uow.records.list(
                resource_type, [scope_filter], mode=mode, limit=limit, offset=offset
            )
            total = await self.uow.records.count(resource_type, [scope_filter], mode=mode)

            return Return.ok(
                RecordListResponse(
                    resource_type=resource_type,
                    scope=decision.scope,
                    mode=mode,
                    items=[record.model_dump(mode="json") for record in records],
                    total=total,
                    limit=limit,
                    offset=offset,
                )
            )
