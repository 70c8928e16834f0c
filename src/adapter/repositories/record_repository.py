from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.storage_errors import storage_errors
from src.app.repositories.record_repository import IRecordRepository
from src.app.services.lifecycle_engine import LifecycleEngine
from src.domain.entities import ReadMode, ResourceType
from src.domain.entity_graph import ENTITY_GRAPH, EntityGraph


class RecordRepository(IRecordRepository):
    """Record repository implementation using SQLModel, one table per resource type"""

    def __init__(self, session: AsyncSession, graph: EntityGraph = ENTITY_GRAPH):
        self.session = session
        self.graph = graph

    async def get_by_id(
        self,
        resource_type: ResourceType,
        record_id: UUID,
        mode: ReadMode = ReadMode.active,
    ) -> Optional[SQLModel]:
        """Get record by ID honouring the read mode"""
        model = self.graph.model(resource_type)
        stmt = (
            select(model)
            .where(model.id == record_id, LifecycleEngine.visibility_filter(model, mode))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(
        self,
        resource_type: ResourceType,
        criteria: Sequence[Any] = (),
        mode: ReadMode = ReadMode.active,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[SQLModel]:
        """List records matching SQL criteria, oldest first"""
        model = self.graph.model(resource_type)
        stmt = (
            select(model)
            .where(LifecycleEngine.visibility_filter(model, mode), *criteria)
            .order_by(model.created_at, model.id)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(
        self,
        resource_type: ResourceType,
        criteria: Sequence[Any] = (),
        mode: ReadMode = ReadMode.active,
    ) -> int:
        """Count records matching SQL criteria"""
        model = self.graph.model(resource_type)
        stmt = (
            select(func.count())
            .select_from(model)
            .where(LifecycleEngine.visibility_filter(model, mode), *criteria)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, record: SQLModel) -> SQLModel:
        """Persist a new record"""
        with storage_errors():
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        return record

    async def transition(
        self,
        resource_type: ResourceType,
        record: SQLModel,
        expect_deleted: bool,
        values: Dict[str, Any],
    ) -> bool:
        """Conditional UPDATE ... WHERE is_deleted = expect_deleted"""
        model = self.graph.model(resource_type)
        stmt = (
            update(model)
            .where(model.id == record.id, model.is_deleted == expect_deleted)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with storage_errors():
            result = await self.session.execute(stmt)
            if result.rowcount != 1:
                return False
            await self.session.refresh(record)
        return True

    async def reassign(
        self,
        resource_type: ResourceType,
        record_ids: Sequence[UUID],
        foreign_key: str,
        new_value: UUID,
    ) -> int:
        """Rewrite one foreign key on active records"""
        if not record_ids:
            return 0
        model = self.graph.model(resource_type)
        stmt = (
            update(model)
            .where(model.id.in_(list(record_ids)), model.is_deleted == False)  # noqa: E712
            .values({foreign_key: new_value})
            .execution_options(synchronize_session=False)
        )
        with storage_errors():
            result = await self.session.execute(stmt)
        return result.rowcount

    async def find_purge_candidates(
        self,
        resource_type: ResourceType,
        limit: int,
        after_id: Optional[UUID] = None,
    ) -> List[SQLModel]:
        """Deleted records with a finite TTL, keyset-paginated by id"""
        model = self.graph.model(resource_type)
        stmt = select(model).where(
            model.is_deleted == True,  # noqa: E712
            model.ttl_seconds.is_not(None),
            model.deleted_at.is_not(None),
        )
        if after_id is not None:
            stmt = stmt.where(model.id > after_id)
        stmt = stmt.order_by(model.id).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def purge(self, resource_type: ResourceType, record_ids: Sequence[UUID]) -> int:
        """Physically remove records that are still soft-deleted"""
        if not record_ids:
            return 0
        model = self.graph.model(resource_type)
        stmt = (
            delete(model)
            .where(model.id.in_(list(record_ids)), model.is_deleted == True)  # noqa: E712
            .execution_options(synchronize_session=False)
        )
        with storage_errors():
            result = await self.session.execute(stmt)
        return result.rowcount
