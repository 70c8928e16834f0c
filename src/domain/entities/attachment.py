"""
Attachment Entity

File metadata attached to a task, an activity or a comment. Binary storage
lives outside this service.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index

from src.domain.base import days

from .enums import ResourceType
from .lifecycle import LifecycleFields


class Attachment(LifecycleFields, table=True):
    __tablename__ = "attachments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    parent_id: UUID = Field(nullable=False)
    parent_type: ResourceType = Field(nullable=False)

    filename: str = Field(max_length=255)
    storage_url: Optional[str] = Field(default=None, max_length=1024)
    uploaded_by: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(90))

    __table_args__ = (Index("idx_attachment_parent", "parent_type", "parent_id"),)
