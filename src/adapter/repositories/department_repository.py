from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.department_repository import IDepartmentRepository
from src.domain.entities import Department


class DepartmentRepository(IDepartmentRepository):
    """Department repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, department_id: UUID) -> Optional[Department]:
        """Get department by ID"""
        stmt = (
            select(Department)
            .where(Department.id == department_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_active_by_tenant(
        self, tenant_id: UUID, exclude_id: Optional[UUID] = None
    ) -> int:
        """Count active departments of a tenant"""
        stmt = (
            select(func.count())
            .select_from(Department)
            .where(Department.tenant_id == tenant_id, Department.is_deleted == False)  # noqa: E712
        )
        if exclude_id is not None:
            stmt = stmt.where(Department.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, department: Department) -> Department:
        """Create a new department"""
        self.session.add(department)
        await self.session.flush()
        await self.session.refresh(department)
        return department

    async def update(self, department: Department) -> Department:
        """Update existing department"""
        self.session.add(department)
        await self.session.flush()
        await self.session.refresh(department)
        return department
