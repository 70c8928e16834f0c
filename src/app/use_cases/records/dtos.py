"""
Record Use Case DTOs (Data Transfer Objects)

Command and Response classes for record lifecycle and scoped reads.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.app.services.cascade_engine import CascadeEffect
from src.domain.entities import ReadMode, ResourceType, Scope


# ============================================================================
# Command DTOs
# ============================================================================


class DeleteRecordCommand(BaseModel):
    """Command for deleting a record and its dependents"""

    resource_type: ResourceType
    record_id: UUID
    # deleted record id -> replacement record id
    reassignments: Dict[UUID, UUID] = Field(default_factory=dict)


class RestoreRecordCommand(BaseModel):
    """Command for restoring a record"""

    resource_type: ResourceType
    record_id: UUID
    cascade_children: bool = False


# ============================================================================
# Response DTOs
# ============================================================================


class RecordLifecycleResponse(BaseModel):
    """Outcome of a delete or restore, consumed by post-commit collaborators"""

    resource_type: ResourceType
    record_id: UUID
    batch_id: Optional[UUID] = None
    effects: List[CascadeEffect] = []


class RecordResponse(BaseModel):
    resource_type: ResourceType
    scope: Scope
    record: Dict[str, Any]


class RecordListResponse(BaseModel):
    resource_type: ResourceType
    scope: Scope
    mode: ReadMode
    items: List[Dict[str, Any]]
    total: int
    limit: int
    offset: int


class AuditEntry(BaseModel):
    action: str
    actor_id: Optional[UUID] = None
    deletion_batch_id: Optional[UUID] = None
    created_at: datetime
    metadata: Optional[Dict[str, Any]] = None


class RestoreAuditResponse(BaseModel):
    """Lifecycle bookkeeping of a record plus its audit history"""

    resource_type: ResourceType
    id: UUID
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[UUID] = None
    restored_at: Optional[datetime] = None
    restored_by: Optional[UUID] = None
    restore_count: int = 0
    deletion_batch_id: Optional[UUID] = None
    ttl_seconds: Optional[int] = None
    history: List[AuditEntry] = []
