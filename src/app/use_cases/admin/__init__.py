"""Admin use cases for system administration operations."""

from .purge_expired_records_use_case import (
    PurgeExpiredRecordsResponse,
    PurgeExpiredRecordsUseCase,
)

__all__ = [
    "PurgeExpiredRecordsUseCase",
    "PurgeExpiredRecordsResponse",
]
