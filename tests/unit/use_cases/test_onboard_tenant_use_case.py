"""
Unit tests for OnboardTenantUseCase and BootstrapPlatformUseCase
"""

from uuid import uuid4
from unittest.mock import AsyncMock

import pytest

from src.app.use_cases.tenants import (
    BootstrapPlatformCommand,
    BootstrapPlatformUseCase,
    OnboardTenantCommand,
    OnboardTenantUseCase,
)
from src.domain.entities import Actor, ActorRole, Department, Tenant


def stub_provisioning(mock_uow):
    async def create_tenant(tenant):
        tenant.id = tenant.id or uuid4()
        return tenant

    async def create_department(department):
        return department

    async def create_actor(actor):
        return actor

    mock_uow.tenants.create = AsyncMock(side_effect=create_tenant)
    mock_uow.departments.create = AsyncMock(side_effect=create_department)
    mock_uow.departments.update = AsyncMock(side_effect=create_department)
    mock_uow.actors.create = AsyncMock(side_effect=create_actor)
    mock_uow.audit_events.create = AsyncMock()


COMMAND = OnboardTenantCommand(
    name="Acme Facilities",
    admin_email="owner@acme.example",
    admin_name="Ada Owner",
)


@pytest.mark.asyncio
async def test_platform_admin_onboards_tenant(mock_uow, make_actor):
    platform_admin = make_actor(role=ActorRole.super_admin, is_platform_actor=True)
    stub_provisioning(mock_uow)

    result = await OnboardTenantUseCase(mock_uow).execute(platform_admin, COMMAND)

    assert result.is_ok()
    tenant = mock_uow.tenants.create.await_args[0][0]
    department = mock_uow.departments.create.await_args[0][0]
    admin = mock_uow.actors.create.await_args[0][0]
    assert isinstance(tenant, Tenant) and tenant.is_platform is False
    assert isinstance(department, Department) and department.tenant_id == tenant.id
    assert isinstance(admin, Actor) and admin.role == ActorRole.super_admin
    assert department.head_actor_id == admin.id
    assert result.value.tenant_id == tenant.id
    assert mock_uow.commit.await_count == 1

    audit_call = mock_uow.audit_events.create.await_args[0][0]
    assert audit_call.action == "tenant_onboarded"
    assert audit_call.actor_id == platform_admin.id


@pytest.mark.asyncio
async def test_tenant_super_admin_cannot_onboard(mock_uow, make_actor):
    tenant_admin = make_actor(role=ActorRole.super_admin)
    stub_provisioning(mock_uow)

    result = await OnboardTenantUseCase(mock_uow).execute(tenant_admin, COMMAND)

    assert result.is_err()
    assert result.error.code == "AUTHORIZATION_DENIED"
    mock_uow.tenants.create.assert_not_awaited()
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_member_cannot_onboard(mock_uow, make_actor):
    result = await OnboardTenantUseCase(mock_uow).execute(make_actor(), COMMAND)

    assert result.is_err()
    assert result.error.code == "AUTHORIZATION_DENIED"


@pytest.mark.asyncio
async def test_bootstrap_creates_platform_tenant(mock_uow):
    mock_uow.tenants.get_platform = AsyncMock(return_value=None)
    stub_provisioning(mock_uow)

    result = await BootstrapPlatformUseCase(mock_uow).execute(
        BootstrapPlatformCommand(name="Platform", admin_email="root@platform.example")
    )

    assert result.is_ok()
    assert result.value.created is True
    assert result.value.is_platform is True
    assert mock_uow.tenants.create.await_args[0][0].is_platform is True
    assert mock_uow.commit.await_count == 1
