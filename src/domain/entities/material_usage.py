"""
MaterialUsage Entity

Quantity and cost of a material booked against a task. Consumed entries
are historical cost records and keep their material reference forever.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field

from src.domain.base import days

from .lifecycle import LifecycleFields


class MaterialUsage(LifecycleFields, table=True):
    __tablename__ = "material_usages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    department_id: UUID = Field(foreign_key="departments.id", nullable=False, index=True)

    material_id: UUID = Field(nullable=False, index=True)
    task_id: UUID = Field(nullable=False, index=True)

    quantity: float = Field(default=1.0, ge=0)
    unit_price: float = Field(default=0.0, ge=0)
    consumed: bool = Field(default=False)

    recorded_by: UUID = Field(nullable=False, index=True)

    ttl_seconds: Optional[int] = Field(default=days(180))
