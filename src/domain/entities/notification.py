"""
Notification Entity

In-app notification addressed to one actor. Delivery (email, push,
socket) is performed by an external collaborator.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field

from src.domain.base import days

from .enums import ResourceType
from .lifecycle import LifecycleFields


class Notification(LifecycleFields, table=True):
    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: Optional[UUID] = Field(
        default=None, foreign_key="departments.id", index=True
    )

    entity_id: Optional[UUID] = Field(default=None, index=True)
    entity_type: Optional[ResourceType] = Field(default=None)

    recipient_id: UUID = Field(nullable=False, index=True)
    created_by: UUID = Field(nullable=False, index=True)

    title: str = Field(max_length=100)
    message: str = Field(default="", max_length=500)
    is_read: bool = Field(default=False)

    ttl_seconds: Optional[int] = Field(default=days(30))
