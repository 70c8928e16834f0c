"""
Unit tests for structural delete/restore invariants
"""

from uuid import uuid4
from unittest.mock import AsyncMock

import pytest

from src.app.services.lifecycle_invariants import assert_deletable, assert_platform_slot_free
from src.domain.entities import Actor, ActorRole, Department, ResourceType, Tenant
from src.domain.errors import InvariantViolation


def make_actor_record(role):
    return Actor(
        id=uuid4(),
        tenant_id=uuid4(),
        department_id=uuid4(),
        email="head@example.com",
        name="Head",
        role=role,
    )


@pytest.mark.asyncio
async def test_last_department_is_undeletable(mock_uow):
    department = Department(id=uuid4(), tenant_id=uuid4(), name="Only")
    mock_uow.departments.count_active_by_tenant = AsyncMock(return_value=0)

    with pytest.raises(InvariantViolation):
        await assert_deletable(ResourceType.department, department, mock_uow)

    mock_uow.departments.count_active_by_tenant.assert_awaited_once_with(
        department.tenant_id, exclude_id=department.id
    )


@pytest.mark.asyncio
async def test_department_with_sibling_is_deletable(mock_uow):
    department = Department(id=uuid4(), tenant_id=uuid4(), name="One of two")
    mock_uow.departments.count_active_by_tenant = AsyncMock(return_value=1)
    mock_uow.actors.count_active_with_roles = AsyncMock(return_value=1)

    await assert_deletable(ResourceType.department, department, mock_uow)


@pytest.mark.asyncio
async def test_department_holding_every_super_admin_is_undeletable(mock_uow):
    department = Department(id=uuid4(), tenant_id=uuid4(), name="Head office")
    mock_uow.departments.count_active_by_tenant = AsyncMock(return_value=1)
    mock_uow.actors.count_active_with_roles = AsyncMock(return_value=0)

    with pytest.raises(InvariantViolation) as exc_info:
        await assert_deletable(ResourceType.department, department, mock_uow)

    assert "super admin" in exc_info.value.error.message
    mock_uow.actors.count_active_with_roles.assert_awaited_once_with(
        department.tenant_id, [ActorRole.super_admin], exclude_department_id=department.id
    )


@pytest.mark.asyncio
async def test_last_super_admin_is_undeletable(mock_uow):
    actor = make_actor_record(ActorRole.super_admin)
    mock_uow.actors.count_active_with_roles = AsyncMock(return_value=0)

    with pytest.raises(InvariantViolation) as exc_info:
        await assert_deletable(ResourceType.actor, actor, mock_uow)

    assert "super admin" in exc_info.value.error.message


@pytest.mark.asyncio
async def test_last_head_of_department_is_undeletable(mock_uow):
    actor = make_actor_record(ActorRole.admin)
    mock_uow.actors.count_active_with_roles = AsyncMock(return_value=0)

    with pytest.raises(InvariantViolation) as exc_info:
        await assert_deletable(ResourceType.actor, actor, mock_uow)

    assert "head of department" in exc_info.value.error.message


@pytest.mark.asyncio
async def test_member_is_always_deletable(mock_uow):
    actor = make_actor_record(ActorRole.member)
    mock_uow.actors.count_active_with_roles = AsyncMock(return_value=0)

    await assert_deletable(ResourceType.actor, actor, mock_uow)

    mock_uow.actors.count_active_with_roles.assert_not_awaited()


@pytest.mark.asyncio
async def test_second_platform_tenant_cannot_be_restored(mock_uow):
    tenant = Tenant(id=uuid4(), name="Old platform", is_platform=True, is_deleted=True)
    mock_uow.tenants.count_active_platform = AsyncMock(return_value=1)

    with pytest.raises(InvariantViolation):
        await assert_platform_slot_free(tenant, mock_uow)


@pytest.mark.asyncio
async def test_customer_tenant_skips_platform_check(mock_uow):
    tenant = Tenant(id=uuid4(), name="Customer", is_deleted=True)
    mock_uow.tenants.count_active_platform = AsyncMock()

    await assert_platform_slot_free(tenant, mock_uow)

    mock_uow.tenants.count_active_platform.assert_not_awaited()
