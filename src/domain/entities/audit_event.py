"""
AuditEvent Entity

Immutable log of lifecycle and administration events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utc_now


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of lifecycle events.

    Business Rules:
    - Immutable (never updated, soft-deleted or purged by the TTL sweep)
    - tenant_id nullable for system events (purge sweeps, bootstrap)
    - deletion_batch_id links a delete/restore event to its cascade batch
    - Metadata stores the affected record ids
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: Optional[UUID] = Field(default=None, index=True)
    actor_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "record_deleted", "tenant_onboarded"
    resource_type: Optional[str] = Field(default=None, max_length=50)
    resource_id: Optional[UUID] = Field(default=None)
    deletion_batch_id: Optional[UUID] = Field(default=None, index=True)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_tenant_action", "tenant_id", "action"),
        Index("idx_audit_resource", "resource_type", "resource_id"),
    )
