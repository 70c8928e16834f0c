"""
Admin API Routes - System Administration Endpoints

For operators and schedulers. Authentication is via Admin API Key, not
actor JWTs.
"""

from typing import Callable

from fastapi import APIRouter, Depends, status

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import PurgeExpiredRecordsResponse, PurgeExpiredRecordsUseCase
from src.app.use_cases.tenants import (
    BootstrapPlatformCommand,
    BootstrapPlatformUseCase,
    TenantProvisionedResponse,
)
from src.depends import get_unit_of_work, get_unit_of_work_factory

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/platform/bootstrap",
    status_code=status.HTTP_200_OK,
    response_model=TenantProvisionedResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def bootstrap_platform(
    request: BootstrapPlatformCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Bootstrap Platform

    Creates the platform tenant, or reports the existing one.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 422 Unprocessable Entity: INVARIANT_VIOLATION
    """
    result = await BootstrapPlatformUseCase(uow).execute(request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/purge",
    status_code=status.HTTP_200_OK,
    response_model=PurgeExpiredRecordsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_expired_records(
    uow_factory: Callable[[], UnitOfWork] = Depends(get_unit_of_work_factory),
):
    """
    Purge Expired Records

    Runs one TTL purge sweep immediately.

    Requires: X-Admin-API-Key header
    """
    use_case = PurgeExpiredRecordsUseCase(uow_factory, batch_size=ApplicationConfig.PURGE_BATCH_SIZE)
    result = await use_case.execute()
    if result.is_err():
        raise_for_error(result.error)
    return result.value
