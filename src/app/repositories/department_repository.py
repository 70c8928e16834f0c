from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Department


class IDepartmentRepository(ABC):
    """Department repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, department_id: UUID) -> Optional[Department]:
        """Get department by ID, deleted or not"""
        pass

    @abstractmethod
    async def count_active_by_tenant(
        self, tenant_id: UUID, exclude_id: Optional[UUID] = None
    ) -> int:
        """Count active departments of a tenant"""
        pass

    @abstractmethod
    async def create(self, department: Department) -> Department:
        """Create a new department"""
        pass

    @abstractmethod
    async def update(self, department: Department) -> Department:
        """Update existing department"""
        pass
