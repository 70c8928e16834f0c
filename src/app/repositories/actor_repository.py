from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from src.domain.entities import Actor, ActorRole


class IActorRepository(ABC):
    """Actor repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, actor_id: UUID) -> Optional[Actor]:
        """Get actor by ID, deleted or not"""
        pass

    @abstractmethod
    async def count_active_with_roles(
        self,
        tenant_id: UUID,
        roles: Sequence[ActorRole],
        department_id: Optional[UUID] = None,
        exclude_id: Optional[UUID] = None,
        exclude_department_id: Optional[UUID] = None,
    ) -> int:
        """Count active actors holding any of the roles"""
        pass

    @abstractmethod
    async def create(self, actor: Actor) -> Actor:
        """Create a new actor"""
        pass
