"""
TaskWatcher Entity

Link between a task and an actor following it.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index

from src.domain.base import days

from .lifecycle import LifecycleFields


class TaskWatcher(LifecycleFields, table=True):
    """
    TaskWatcher entity.

    Business Rules:
    - Removed together with the task or with the watching actor, so a
      deleted actor never shows up among a task's watchers
    """

    __tablename__ = "task_watchers"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    task_id: UUID = Field(nullable=False, index=True)
    actor_id: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(30))

    __table_args__ = (Index("idx_task_watcher_task_actor", "task_id", "actor_id"),)
