"""
Use Case: Purge Expired Records

Runs the TTL purge sweep and records a system audit event. Each purge batch
commits on its own; only the audit event shares a final unit of work.
"""

from datetime import datetime
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from libs.result import Result, Return
from src.app.services.purge_sweeper import PurgeSweeper
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.errors import DomainError


class PurgeExpiredRecordsResponse(BaseModel):
    """Response DTO for PurgeExpiredRecordsUseCase"""

    started_at: datetime
    purged: Dict[str, int]
    total: int


class PurgeExpiredRecordsUseCase:
    def __init__(self, uow_factory: Callable[[], UnitOfWork], batch_size: int = 200):
        self.uow_factory = uow_factory
        self.sweeper = PurgeSweeper(uow_factory, batch_size=batch_size)

    async def execute(
        self, now: Optional[datetime] = None
    ) -> Result[PurgeExpiredRecordsResponse]:
        try:
            # 1. Sweep
            report = await self.sweeper.sweep(now)

            # 2. Create audit event
            uow = self.uow_factory()
            async with uow:
                await uow.audit_events.create(
                    AuditEvent(
                        action="records_purged",
                        event_metadata={
                            "started_at": report.started_at.isoformat(),
                            "purged": {rt.value: n for rt, n in report.purged.items()},
                        },
                    )
                )
                await uow.commit()
        except DomainError as exc:
            return Return.err(exc.error)

        return Return.ok(
            PurgeExpiredRecordsResponse(
                started_at=report.started_at,
                purged={rt.value: n for rt, n in report.purged.items()},
                total=report.total,
            )
        )
