"""
Lifecycle Fields

Bookkeeping columns carried by every record managed by the lifecycle
engines. Declared on a plain SQLModel base so each table gets its own
columns; storage engines only need to honour the same field names.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.domain.base import utc_now


class LifecycleFields(SQLModel):
    """
    Soft-delete state shared by all records.

    Invariants:
    - is_deleted=True implies deleted_at/deleted_by set, restored_at/restored_by cleared
    - deletion_batch_id is NULL while active, shared by records deleted in one cascade
    - ttl_seconds NULL means the record is never purged
    """

    is_deleted: bool = Field(default=False, index=True)
    deleted_at: Optional[datetime] = Field(default=None, index=True)
    deleted_by: Optional[UUID] = Field(default=None)
    restored_at: Optional[datetime] = Field(default=None)
    restored_by: Optional[UUID] = Field(default=None)
    restore_count: int = Field(default=0)
    deletion_batch_id: Optional[UUID] = Field(default=None, index=True)
    ttl_seconds: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
