"""
Actor Entity

A user acting inside one tenant and one department.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index

from src.domain.base import days

from .enums import ActorRole
from .lifecycle import LifecycleFields


class Actor(LifecycleFields, table=True):
    """
    Actor entity.

    Business Rules:
    - A tenant always keeps at least one active super_admin
    - A department always keeps at least one active head (super_admin/admin)
    - Platform actors are actors whose tenant is the platform tenant
    """

    __tablename__ = "actors"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    email: str = Field(max_length=255)
    name: str = Field(max_length=100)
    role: ActorRole = Field(default=ActorRole.member)

    ttl_seconds: Optional[int] = Field(default=days(365))

    __table_args__ = (
        Index("idx_actor_tenant_role", "tenant_id", "role"),
        Index("idx_actor_department_role", "department_id", "role"),
    )
