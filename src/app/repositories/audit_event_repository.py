from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        pass

    @abstractmethod
    async def list_for_resource(
        self, resource_type: str, resource_id: UUID, limit: int = 50
    ) -> List[AuditEvent]:
        """Audit events of one record, newest first"""
        pass

    @abstractmethod
    async def list_for_batch(self, deletion_batch_id: UUID) -> List[AuditEvent]:
        """Audit events sharing a deletion batch"""
        pass
