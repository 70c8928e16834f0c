"""
Record API Routes

Scoped reads, cascade delete and restore for every record type in the
entity graph.
"""

from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.records import (
    DeleteRecordCommand,
    DeleteRecordUseCase,
    GetRecordUseCase,
    GetRestoreAuditUseCase,
    ListRecordsUseCase,
    RecordLifecycleResponse,
    RecordListResponse,
    RecordResponse,
    RestoreAuditResponse,
    RestoreRecordCommand,
    RestoreRecordUseCase,
)
from src.depends import get_current_actor, get_unit_of_work
from src.domain.actor_context import ActorContext
from src.domain.entities import ReadMode, ResourceType

router = APIRouter(prefix="/records", tags=["Records"])


class DeleteRecordRequest(BaseModel):
    """
    Delete record HTTP request payload

    reassignments maps a record being deleted to the record that takes over
    its dependents (e.g. vendor -> replacement vendor).
    """

    reassignments: Dict[UUID, UUID] = Field(default_factory=dict)


class RestoreRecordRequest(BaseModel):
    cascade_children: bool = Field(
        default=False,
        description="Also restore the records deleted in the same cascade",
    )


@router.get(
    "/{resource_type}",
    status_code=status.HTTP_200_OK,
    response_model=RecordListResponse,
)
async def list_records(
    resource_type: ResourceType,
    mode: ReadMode = Query(ReadMode.active),
    limit: int = Query(ApplicationConfig.DEFAULT_PAGE_LIMIT, ge=1, le=ApplicationConfig.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    actor: ActorContext = Depends(get_current_actor),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List records visible to the caller.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: AUTHORIZATION_DENIED
    """
    result = await ListRecordsUseCase(uow).execute(actor, resource_type, mode, limit, offset)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get(
    "/{resource_type}/{record_id}",
    status_code=status.HTTP_200_OK,
    response_model=RecordResponse,
)
async def get_record(
    resource_type: ResourceType,
    record_id: UUID,
    mode: ReadMode = Query(ReadMode.active),
    actor: ActorContext = Depends(get_current_actor),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get one record.

    Raises:
        - 403 Forbidden: AUTHORIZATION_DENIED
        - 404 Not Found: NOT_FOUND (absent or outside the caller's scope)
    """
    result = await GetRecordUseCase(uow).execute(actor, resource_type, record_id, mode)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{resource_type}/{record_id}",
    status_code=status.HTTP_200_OK,
    response_model=RecordLifecycleResponse,
)
async def delete_record(
    resource_type: ResourceType,
    record_id: UUID,
    request: Optional[DeleteRecordRequest] = Body(default=None),
    actor: ActorContext = Depends(get_current_actor),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Soft delete a record and its dependents in one transaction.

    Raises:
        - 403 Forbidden: AUTHORIZATION_DENIED
        - 404 Not Found: NOT_FOUND
        - 409 Conflict: CONFLICT_BLOCKED_BY_CHILDREN, LIFECYCLE_CONFLICT
        - 422 Unprocessable Entity: INVARIANT_VIOLATION, INVALID_REASSIGNMENT
        - 503 Service Unavailable: TRANSIENT_STORAGE_CONFLICT (retries exhausted)
    """
    command = DeleteRecordCommand(
        resource_type=resource_type,
        record_id=record_id,
        reassignments=request.reassignments if request else {},
    )
    use_case = DeleteRecordUseCase(uow, max_retries=ApplicationConfig.MAX_TRANSIENT_RETRIES)
    result = await use_case.execute(actor, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/{resource_type}/{record_id}/restore",
    status_code=status.HTTP_200_OK,
    response_model=RecordLifecycleResponse,
)
async def restore_record(
    resource_type: ResourceType,
    record_id: UUID,
    request: Optional[RestoreRecordRequest] = Body(default=None),
    actor: ActorContext = Depends(get_current_actor),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Restore a deleted record, optionally with everything from its deletion batch.

    Raises:
        - 403 Forbidden: AUTHORIZATION_DENIED
        - 404 Not Found: NOT_FOUND
        - 409 Conflict: LIFECYCLE_CONFLICT (record is not deleted)
        - 422 Unprocessable Entity: INVARIANT_VIOLATION (deleted parent, second platform)
    """
    command = RestoreRecordCommand(
        resource_type=resource_type,
        record_id=record_id,
        cascade_children=request.cascade_children if request else False,
    )
    use_case = RestoreRecordUseCase(uow, max_retries=ApplicationConfig.MAX_TRANSIENT_RETRIES)
    result = await use_case.execute(actor, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get(
    "/{resource_type}/{record_id}/audit",
    status_code=status.HTTP_200_OK,
    response_model=RestoreAuditResponse,
)
async def get_restore_audit(
    resource_type: ResourceType,
    record_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Lifecycle fields and audit history of a record"""
    result = await GetRestoreAuditUseCase(uow).execute(actor, resource_type, record_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
