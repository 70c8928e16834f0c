"""
Structural invariants guarding deletes and restores.

Checked on the root of a cascade only. A department delete also guards the
tenant's last super admin, since its actors are removed with it; a tenant
delete takes every invariant with it.
"""

from typing import Any

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import HEAD_OF_DEPARTMENT_ROLES, ActorRole, ResourceType
from src.domain.errors import InvariantViolation


async def assert_deletable(resource_type: ResourceType, record: Any, uow: UnitOfWork):
    """
    Raises:
        InvariantViolation: deleting the record would break the tenant structure
    """
    if resource_type == ResourceType.tenant:
        if record.is_platform:
            raise InvariantViolation(
                "The platform tenant cannot be deleted",
                reason="Platform tenant administers every other tenant",
            )

    elif resource_type == ResourceType.department:
        remaining = await uow.departments.count_active_by_tenant(
            record.tenant_id, exclude_id=record.id
        )
        if remaining == 0:
            raise InvariantViolation(
                "Cannot delete the last department of a tenant",
                reason="A tenant must keep at least one department",
            )
        # Actors of the department go with it
        admins_elsewhere = await uow.actors.count_active_with_roles(
            record.tenant_id, [ActorRole.super_admin], exclude_department_id=record.id
        )
        if admins_elsewhere == 0:
            raise InvariantViolation(
                "Cannot delete the department holding the last super admin of a tenant",
                reason="A tenant must keep at least one super admin",
            )

    elif resource_type == ResourceType.actor:
        await _assert_actor_not_last_admin(record, uow)


async def _assert_actor_not_last_admin(actor: Any, uow: UnitOfWork):
    if actor.role == ActorRole.super_admin:
        remaining = await uow.actors.count_active_with_roles(
            actor.tenant_id, [ActorRole.super_admin], exclude_id=actor.id
        )
        if remaining == 0:
            raise InvariantViolation(
                "Cannot delete the last super admin of a tenant",
                reason="A tenant must keep at least one super admin",
            )

    if actor.role in HEAD_OF_DEPARTMENT_ROLES:
        remaining = await uow.actors.count_active_with_roles(
            actor.tenant_id,
            HEAD_OF_DEPARTMENT_ROLES,
            department_id=actor.department_id,
            exclude_id=actor.id,
        )
        if remaining == 0:
            raise InvariantViolation(
                "Cannot delete the last head of department",
                reason="A department must keep at least one super admin or admin",
            )


async def assert_platform_slot_free(tenant: Any, uow: UnitOfWork):
    """Only one tenant may be the active platform tenant"""
    if not tenant.is_platform:
        return
    others = await uow.tenants.count_active_platform(exclude_id=tenant.id)
    if others > 0:
        raise InvariantViolation(
            "A platform tenant already exists",
            reason="Exactly one tenant may be the platform tenant",
        )
