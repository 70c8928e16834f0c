from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID, deleted or not"""
        pass

    @abstractmethod
    async def get_platform(self) -> Optional[Tenant]:
        """Get the platform tenant"""
        pass

    @abstractmethod
    async def count_active_platform(self, exclude_id: Optional[UUID] = None) -> int:
        """Count active platform tenants"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        pass
