"""
Use Case: Onboard Tenant

Platform administrators create customer tenants. The new tenant starts with
one department headed by its first super admin, so its structural
invariants hold from the first commit.
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.scope_resolver import ScopeResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext
from src.domain.entities import AuditEvent, Operation, ResourceType, Scope
from src.domain.errors import AuthorizationDenied, DomainError

from .onboarding_dtos import OnboardTenantCommand, TenantProvisionedResponse
from .provisioning import provision_tenant


class OnboardTenantUseCase:
    """
    Business Logic:
    1. Authorize tenant creation; only the cross-tenant scope may create tenants
    2. Create tenant, first department and super admin
    3. Create audit event
    4. Commit
    """

    def __init__(self, uow: UnitOfWork, resolver: Optional[ScopeResolver] = None):
        self.uow = uow
        self.resolver = resolver or ScopeResolver()

    async def execute(
        self, actor: ActorContext, command: OnboardTenantCommand
    ) -> Result[TenantProvisionedResponse]:
        async with self.uow:
            try:
                # 1. Authorize
                decision = self.resolver.require(actor, ResourceType.tenant, Operation.create)
                if decision.scope != Scope.all:
                    raise AuthorizationDenied(
                        "Only platform administrators can onboard tenants"
                    )

                # 2. Provision
                response = await provision_tenant(
                    self.uow,
                    name=command.name,
                    department_name=command.department_name,
                    admin_email=command.admin_email,
                    admin_name=command.admin_name,
                )

                # 3. Create audit event
                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=response.tenant_id,
                        actor_id=actor.id,
                        action="tenant_onboarded",
                        resource_type=ResourceType.tenant.value,
                        resource_id=response.tenant_id,
                        event_metadata={
                            "name": command.name,
                            "admin_id": str(response.admin_id),
                            "onboarded_by_tenant": str(actor.tenant_id),
                        },
                    )
                )

                # 4. Commit transaction
                await self.uow.commit()
            except DomainError as exc:
                return Return.err(exc.error)

        return Return.ok(response)
