"""
Material Entity

Inventory item used by tasks, optionally supplied by a vendor.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field

from src.domain.base import days

from .lifecycle import LifecycleFields


class Material(LifecycleFields, table=True):
    __tablename__ = "materials"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    name: str = Field(max_length=100)
    unit: str = Field(default="pcs", max_length=20)
    unit_price: float = Field(default=0.0, ge=0)

    vendor_id: Optional[UUID] = Field(default=None, index=True)
    added_by: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(180))
