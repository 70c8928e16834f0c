"""
TTL Purge Sweeper

Physically removes soft-deleted records whose TTL has elapsed. Runs outside
request handling, one short transaction per batch, children types before
their parents. Every batch re-reads what is still deleted, so an interrupted
sweep is simply run again.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import ResourceType
from src.domain.entity_graph import ENTITY_GRAPH, EntityGraph

logger = logging.getLogger(__name__)


class PurgeReport(BaseModel):
    started_at: datetime
    purged: Dict[ResourceType, int] = {}

    @property
    def total(self) -> int:
        return sum(self.purged.values())


def is_expired(record, now: datetime) -> bool:
    """A record with no TTL never expires"""
    if not record.is_deleted or record.ttl_seconds is None or record.deleted_at is None:
        return False
    return record.deleted_at + timedelta(seconds=record.ttl_seconds) < now


class PurgeSweeper:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        graph: EntityGraph = ENTITY_GRAPH,
        batch_size: int = 200,
    ):
        self.uow_factory = uow_factory
        self.graph = graph
        self.batch_size = batch_size

    async def sweep(self, now: Optional[datetime] = None) -> PurgeReport:
        now = now or utc_now()
        report = PurgeReport(started_at=now)

        for resource_type in reversed(self.graph.topological_order()):
            purged = await self._sweep_type(resource_type, now)
            if purged:
                report.purged[resource_type] = purged
                logger.info(f"Purged {purged} expired {resource_type.value} record(s)")

        logger.info(f"Purge sweep finished: {report.total} record(s) removed")
        return report

    async def _sweep_type(self, resource_type: ResourceType, now: datetime) -> int:
        purged = 0
        after_id = None

        while True:
            uow = self.uow_factory()
            async with uow:
                candidates = await uow.records.find_purge_candidates(
                    resource_type, self.batch_size, after_id=after_id
                )
                if not candidates:
                    return purged

                after_id = candidates[-1].id
                expired = [record.id for record in candidates if is_expired(record, now)]
                if expired:
                    purged += await uow.records.purge(resource_type, expired)
                    await uow.commit()

            if len(candidates) < self.batch_size:
                return purged
