"""
Load Actor Context Use Case

Resolves the authenticated token subject into the ActorContext every
authorization decision is made for.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext


class LoadActorContextUseCase:
    """
    Business Rules:
    - Actor must exist and not be deleted
    - Actor's tenant must exist and not be deleted
    - is_platform_actor is derived from the tenant, never from the token
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: UUID) -> Result[ActorContext]:
        async with self.uow:
            actor = await self.uow.actors.get_by_id(actor_id)
            if actor is None or actor.is_deleted:
                return Return.err(Error("ACTOR_NOT_FOUND", "Actor not found"))

            tenant = await self.uow.tenants.get_by_id(actor.tenant_id)
            if tenant is None or tenant.is_deleted:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            return Return.ok(
                ActorContext(
                    id=actor.id,
                    role=actor.role,
                    tenant_id=actor.tenant_id,
                    department_id=actor.department_id,
                    is_platform_actor=tenant.is_platform,
                )
            )
