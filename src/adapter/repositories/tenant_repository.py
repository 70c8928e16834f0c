from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.storage_errors import storage_errors
from src.app.repositories.tenant_repository import ITenantRepository
from src.domain.entities import Tenant
from src.domain.errors import InvariantViolation


class TenantRepository(ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        stmt = (
            select(Tenant)
            .where(Tenant.id == tenant_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_platform(self) -> Optional[Tenant]:
        """Get the platform tenant"""
        stmt = select(Tenant).where(Tenant.is_platform == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_active_platform(self, exclude_id: Optional[UUID] = None) -> int:
        """Count active platform tenants"""
        stmt = (
            select(func.count())
            .select_from(Tenant)
            .where(Tenant.is_platform == True, Tenant.is_deleted == False)  # noqa: E712
        )
        if exclude_id is not None:
            stmt = stmt.where(Tenant.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant; a second platform tenant violates the unique index"""
        try:
            with storage_errors():
                self.session.add(tenant)
                await self.session.flush()
        except IntegrityError as exc:
            if tenant.is_platform:
                raise InvariantViolation(
                    "A platform tenant already exists",
                    reason="Exactly one tenant may be the platform tenant",
                ) from exc
            raise
        await self.session.refresh(tenant)
        return tenant
