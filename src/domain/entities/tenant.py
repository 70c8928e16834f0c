"""
Tenant Entity

Isolation boundary shared by every other record. Exactly one tenant is the
platform tenant that administers all others.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Field, Index

from .lifecycle import LifecycleFields


class Tenant(LifecycleFields, table=True):
    """
    Tenant entity - isolated workspace for a customer organization.

    Business Rules:
    - is_platform is set once at bootstrap and never changes
    - At most one row has is_platform=True (partial unique index)
    - The platform tenant can never be deleted
    - Never purged (ttl_seconds stays NULL)
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    is_platform: bool = Field(default=False)

    ttl_seconds: Optional[int] = Field(default=None)

    __table_args__ = (
        Index(
            "uq_tenant_single_platform",
            "is_platform",
            unique=True,
            sqlite_where=text("is_platform = 1"),
            postgresql_where=text("is_platform"),
        ),
    )
