"""
Department Entity

Subdivision of a tenant. A tenant always keeps at least one department.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index

from .lifecycle import LifecycleFields


class Department(LifecycleFields, table=True):
    """
    Department entity.

    Business Rules:
    - Belongs to exactly one tenant
    - The last active department of a tenant cannot be deleted
    - head_actor_id points at the actor heading the department
    - Never purged (ttl_seconds stays NULL)
    """

    __tablename__ = "departments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    name: str = Field(max_length=100)
    head_actor_id: Optional[UUID] = Field(default=None, index=True)

    ttl_seconds: Optional[int] = Field(default=None)

    __table_args__ = (Index("idx_department_tenant_deleted", "tenant_id", "is_deleted"),)
