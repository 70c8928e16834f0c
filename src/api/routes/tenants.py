from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tenants import (
    OnboardTenantCommand,
    OnboardTenantUseCase,
    TenantProvisionedResponse,
)
from src.depends import get_current_actor, get_unit_of_work
from src.domain.actor_context import ActorContext

router = APIRouter(prefix="/tenants", tags=["Tenant"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TenantProvisionedResponse,
)
async def onboard_tenant(
    request: OnboardTenantCommand,
    actor: ActorContext = Depends(get_current_actor),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Onboard Tenant

    Platform administrators create a tenant with its first department and
    super admin.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: AUTHORIZATION_DENIED (not a platform administrator)
    """
    result = await OnboardTenantUseCase(uow).execute(actor, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
