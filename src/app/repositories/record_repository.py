from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlmodel import SQLModel

from src.domain.entities import ReadMode, ResourceType


class IRecordRepository(ABC):
    """Generic record access over every type in the entity graph - application layer"""

    @abstractmethod
    async def get_by_id(
        self,
        resource_type: ResourceType,
        record_id: UUID,
        mode: ReadMode = ReadMode.active,
    ) -> Optional[SQLModel]:
        """Get record by ID honouring the read mode"""
        pass

    @abstractmethod
    async def list(
        self,
        resource_type: ResourceType,
        criteria: Sequence[Any] = (),
        mode: ReadMode = ReadMode.active,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[SQLModel]:
        """List records matching SQL criteria, oldest first"""
        pass

    @abstractmethod
    async def count(
        self,
        resource_type: ResourceType,
        criteria: Sequence[Any] = (),
        mode: ReadMode = ReadMode.active,
    ) -> int:
        """Count records matching SQL criteria"""
        pass

    @abstractmethod
    async def create(self, record: SQLModel) -> SQLModel:
        """Persist a new record"""
        pass

    @abstractmethod
    async def transition(
        self,
        resource_type: ResourceType,
        record: SQLModel,
        expect_deleted: bool,
        values: Dict[str, Any],
    ) -> bool:
        """
        Apply lifecycle values only if is_deleted still equals expect_deleted.

        Returns:
            True when the row was updated, False when its state had changed
        """
        pass

    @abstractmethod
    async def reassign(
        self,
        resource_type: ResourceType,
        record_ids: Sequence[UUID],
        foreign_key: str,
        new_value: UUID,
    ) -> int:
        """Rewrite one foreign key on the given records"""
        pass

    @abstractmethod
    async def find_purge_candidates(
        self,
        resource_type: ResourceType,
        limit: int,
        after_id: Optional[UUID] = None,
    ) -> List[SQLModel]:
        """Deleted records with a finite TTL, keyset-paginated by id"""
        pass

    @abstractmethod
    async def purge(self, resource_type: ResourceType, record_ids: Sequence[UUID]) -> int:
        """Physically remove records that are still soft-deleted"""
        pass
