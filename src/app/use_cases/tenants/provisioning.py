"""Creates a tenant together with the structure every tenant must keep."""

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Actor, ActorRole, Department, Tenant

from .onboarding_dtos import TenantProvisionedResponse


async def provision_tenant(
    uow: UnitOfWork,
    name: str,
    department_name: str,
    admin_email: str,
    admin_name: str,
    is_platform: bool = False,
) -> TenantProvisionedResponse:
    """
    Tenant, first department and a super admin heading it.

    Raises:
        InvariantViolation: a second platform tenant was requested
    """
    tenant = await uow.tenants.create(Tenant(name=name, is_platform=is_platform))

    department = await uow.departments.create(
        Department(tenant_id=tenant.id, name=department_name)
    )

    admin = await uow.actors.create(
        Actor(
            tenant_id=tenant.id,
            department_id=department.id,
            email=admin_email,
            name=admin_name,
            role=ActorRole.super_admin,
        )
    )

    department.head_actor_id = admin.id
    await uow.departments.update(department)

    return TenantProvisionedResponse(
        tenant_id=tenant.id,
        department_id=department.id,
        admin_id=admin.id,
        is_platform=is_platform,
    )
