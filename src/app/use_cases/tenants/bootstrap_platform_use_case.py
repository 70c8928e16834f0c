"""
Use Case: Bootstrap Platform

Creates the single platform tenant on first start. Running it again is a
no-op that reports the existing platform tenant.
"""

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Actor, ActorRole, AuditEvent, Department, ResourceType, Tenant
from src.domain.errors import DomainError

from .onboarding_dtos import BootstrapPlatformCommand, TenantProvisionedResponse
from .provisioning import provision_tenant


class BootstrapPlatformUseCase:
    """
    Business Logic:
    1. Return the existing platform tenant if there is one
    2. Create tenant (is_platform), department and platform super admin
    3. Create audit event
    4. Commit
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: BootstrapPlatformCommand
    ) -> Result[TenantProvisionedResponse]:
        async with self.uow:
            try:
                # 1. Existing platform tenant
                platform = await self.uow.tenants.get_platform()
                if platform is not None:
                    return await self._describe(platform)

                # 2. Provision
                response = await provision_tenant(
                    self.uow,
                    name=command.name,
                    department_name=command.department_name,
                    admin_email=command.admin_email,
                    admin_name=command.admin_name,
                    is_platform=True,
                )

                # 3. Create audit event
                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=response.tenant_id,
                        actor_id=None,
                        action="platform_bootstrapped",
                        resource_type=ResourceType.tenant.value,
                        resource_id=response.tenant_id,
                        event_metadata={"admin_id": str(response.admin_id)},
                    )
                )

                # 4. Commit transaction
                await self.uow.commit()
            except DomainError as exc:
                return Return.err(exc.error)

        return Return.ok(response)

    async def _describe(self, platform: Tenant) -> Result[TenantProvisionedResponse]:
        departments = await self.uow.records.list(
            ResourceType.department, [Department.tenant_id == platform.id], limit=1
        )
        admins = await self.uow.records.list(
            ResourceType.actor,
            [Actor.tenant_id == platform.id, Actor.role == ActorRole.super_admin],
            limit=1,
        )
        if not departments or not admins:
            return Return.err(
                Error(
                    "PLATFORM_INCOMPLETE",
                    "Platform tenant exists without a department or super admin",
                )
            )

        return Return.ok(
            TenantProvisionedResponse(
                tenant_id=platform.id,
                department_id=departments[0].id,
                admin_id=admins[0].id,
                is_platform=True,
                created=False,
            )
        )
