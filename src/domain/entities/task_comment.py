"""
TaskComment Entity

Threaded comment on a task, an activity or another comment.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index

from src.domain.base import days

from .enums import ResourceType
from .lifecycle import LifecycleFields

MAX_COMMENT_DEPTH = 3


class TaskComment(LifecycleFields, table=True):
    """
    TaskComment entity.

    Business Rules:
    - parent_type is one of task, task_activity, task_comment
    - depth is 1 for a top-level comment and never exceeds MAX_COMMENT_DEPTH
    """

    __tablename__ = "task_comments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    parent_id: UUID = Field(nullable=False)
    parent_type: ResourceType = Field(nullable=False)
    depth: int = Field(default=1, ge=1, le=MAX_COMMENT_DEPTH)

    body: str = Field(default="", max_length=2000)
    created_by: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(90))

    __table_args__ = (Index("idx_comment_parent", "parent_type", "parent_id"),)
