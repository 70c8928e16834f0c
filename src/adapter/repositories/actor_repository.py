from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.actor_repository import IActorRepository
from src.domain.entities import Actor, ActorRole


class ActorRepository(IActorRepository):
    """Actor repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, actor_id: UUID) -> Optional[Actor]:
        """Get actor by ID"""
        stmt = (
            select(Actor)
            .where(Actor.id == actor_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_active_with_roles(
        self,
        tenant_id: UUID,
        roles: Sequence[ActorRole],
        department_id: Optional[UUID] = None,
        exclude_id: Optional[UUID] = None,
        exclude_department_id: Optional[UUID] = None,
    ) -> int:
        """Count active actors holding any of the roles"""
        stmt = (
            select(func.count())
            .select_from(Actor)
            .where(
                Actor.tenant_id == tenant_id,
                Actor.role.in_(list(roles)),
                Actor.is_deleted == False,  # noqa: E712
            )
        )
        if department_id is not None:
            stmt = stmt.where(Actor.department_id == department_id)
        if exclude_id is not None:
            stmt = stmt.where(Actor.id != exclude_id)
        if exclude_department_id is not None:
            stmt = stmt.where(Actor.department_id != exclude_department_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, actor: Actor) -> Actor:
        """Create a new actor"""
        self.session.add(actor)
        await self.session.flush()
        await self.session.refresh(actor)
        return actor
