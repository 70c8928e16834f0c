"""
Vendor Entity

External supplier working on project tasks. Tenant-wide, no department.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field

from src.domain.base import days

from .lifecycle import LifecycleFields


class Vendor(LifecycleFields, table=True):
    __tablename__ = "vendors"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    email: Optional[str] = Field(default=None, max_length=255)
    created_by: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(180))
