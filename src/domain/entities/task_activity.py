"""
TaskActivity Entity

Progress entry logged against a task.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field

from src.domain.base import days

from .lifecycle import LifecycleFields


class TaskActivity(LifecycleFields, table=True):
    __tablename__ = "task_activities"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    task_id: UUID = Field(nullable=False, index=True)
    description: str = Field(default="", max_length=2000)
    created_by: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(90))
