"""
Task Entity

Single table for all task variants (project, routine, assigned).
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index

from src.domain.base import days

from .enums import TaskStatus, TaskType
from .lifecycle import LifecycleFields


class Task(LifecycleFields, table=True):
    """
    Task entity.

    Business Rules:
    - Owned by its creator and, for assigned tasks, by its assignee
    - Project tasks may reference a vendor; a vendor cannot be deleted while
      open project tasks still reference it unless they are reassigned
    - Completed tasks are historical and keep their vendor reference
    """

    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    task_type: TaskType = Field(default=TaskType.routine)
    title: str = Field(max_length=255)
    status: TaskStatus = Field(default=TaskStatus.to_do)

    created_by: UUID = Field(nullable=False, index=True)
    assignee_id: Optional[UUID] = Field(default=None, index=True)
    vendor_id: Optional[UUID] = Field(default=None, index=True)

    ttl_seconds: Optional[int] = Field(default=days(180))

    __table_args__ = (Index("idx_task_tenant_department", "tenant_id", "department_id"),)
