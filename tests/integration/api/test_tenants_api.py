import pytest
from httpx import AsyncClient

from tests.integration.seed import auth_headers

ONBOARD = {
    "name": "Initech",
    "admin_email": "bill@initech.example",
    "admin_name": "Bill",
}


@pytest.mark.asyncio
async def test_platform_admin_onboards_tenant(client: AsyncClient, world):
    response = await client.post(
        "/api/tenants", json=ONBOARD, headers=auth_headers(world.platform_admin.id)
    )

    assert response.status_code == 201
    data = response.json()
    assert data["is_platform"] is False
    assert data["created"] is True

    # The new super admin can act inside the new tenant right away
    admin_headers = auth_headers(data["admin_id"])
    department = await client.get(
        f"/api/records/department/{data['department_id']}", headers=admin_headers
    )
    assert department.status_code == 200
    assert department.json()["record"]["head_actor_id"] == data["admin_id"]


@pytest.mark.asyncio
async def test_tenant_super_admin_cannot_onboard(client: AsyncClient, world):
    response = await client.post("/api/tenants", json=ONBOARD, headers=auth_headers(world.s.id))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHORIZATION_DENIED"


@pytest.mark.asyncio
async def test_onboard_validates_payload(client: AsyncClient, world):
    response = await client.post(
        "/api/tenants", json={"name": "No admin"}, headers=auth_headers(world.platform_admin.id)
    )

    assert response.status_code == 422
