from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.actor_repository import ActorRepository
from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.department_repository import DepartmentRepository
from src.adapter.repositories.record_repository import RecordRepository
from src.adapter.repositories.storage_errors import storage_errors
from src.adapter.repositories.tenant_repository import TenantRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    SQLAlchemy implementation of UnitOfWork pattern.

    owns_session: close the session on exit; set when the unit of work was
    given a fresh session rather than a request-scoped one
    """

    def __init__(self, session: AsyncSession, owns_session: bool = False):
        self.session = session
        self.owns_session = owns_session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.records = RecordRepository(self.session)
        self.tenants = TenantRepository(self.session)
        self.departments = DepartmentRepository(self.session)
        self.actors = ActorRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed is discarded, including a cancelled cascade
        try:
            await self.rollback()
        finally:
            if self.owns_session:
                await self.session.close()

    async def commit(self):
        with storage_errors():
            await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
