from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def list_for_resource(
        self, resource_type: str, resource_id: UUID, limit: int = 50
    ) -> List[AuditEvent]:
        """Audit events of one record, newest first"""
        stmt = (
            select(AuditEvent)
            .where(
                AuditEvent.resource_type == resource_type,
                AuditEvent.resource_id == resource_id,
            )
            .order_by(AuditEvent.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_batch(self, deletion_batch_id: UUID) -> List[AuditEvent]:
        """Audit events sharing a deletion batch"""
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.deletion_batch_id == deletion_batch_id)
            .order_by(AuditEvent.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
