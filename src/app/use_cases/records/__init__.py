"""Record use cases: scoped reads, cascade delete and restore."""

from .delete_record_use_case import DeleteRecordUseCase
from .dtos import (
    AuditEntry,
    DeleteRecordCommand,
    RecordLifecycleResponse,
    RecordListResponse,
    RecordResponse,
    RestoreAuditResponse,
    RestoreRecordCommand,
)
from .get_record_use_case import GetRecordUseCase
from .get_restore_audit_use_case import GetRestoreAuditUseCase
from .list_records_use_case import ListRecordsUseCase
from .restore_record_use_case import RestoreRecordUseCase

__all__ = [
    "DeleteRecordUseCase",
    "RestoreRecordUseCase",
    "GetRecordUseCase",
    "ListRecordsUseCase",
    "GetRestoreAuditUseCase",
    "DeleteRecordCommand",
    "RestoreRecordCommand",
    "RecordLifecycleResponse",
    "RecordResponse",
    "RecordListResponse",
    "RestoreAuditResponse",
    "AuditEntry",
]
