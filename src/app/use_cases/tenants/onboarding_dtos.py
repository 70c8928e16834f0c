"""
Tenant Use Case DTOs (Data Transfer Objects)

Command and Response classes for platform bootstrap and tenant onboarding.
"""

from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================================
# Command DTOs
# ============================================================================


class BootstrapPlatformCommand(BaseModel):
    """Command for creating the platform tenant"""

    name: str = Field(min_length=1, max_length=255)
    admin_email: str = Field(min_length=3, max_length=255)
    admin_name: str = Field(default="Platform Admin", min_length=1, max_length=100)
    department_name: str = Field(default="Platform Operations", min_length=1, max_length=100)


class OnboardTenantCommand(BaseModel):
    """Command for onboarding a customer tenant"""

    name: str = Field(min_length=1, max_length=255)
    department_name: str = Field(default="Administration", min_length=1, max_length=100)
    admin_email: str = Field(min_length=3, max_length=255)
    admin_name: str = Field(min_length=1, max_length=100)


# ============================================================================
# Response DTOs
# ============================================================================


class TenantProvisionedResponse(BaseModel):
    """Tenant with its first department and super admin"""

    tenant_id: UUID
    department_id: UUID
    admin_id: UUID
    is_platform: bool
    created: bool = True
