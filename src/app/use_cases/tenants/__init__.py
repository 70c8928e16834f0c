"""Tenant use cases: platform bootstrap and tenant onboarding."""

from .bootstrap_platform_use_case import BootstrapPlatformUseCase
from .onboard_tenant_use_case import OnboardTenantUseCase
from .onboarding_dtos import (
    BootstrapPlatformCommand,
    OnboardTenantCommand,
    TenantProvisionedResponse,
)

__all__ = [
    "BootstrapPlatformUseCase",
    "OnboardTenantUseCase",
    "BootstrapPlatformCommand",
    "OnboardTenantCommand",
    "TenantProvisionedResponse",
]
