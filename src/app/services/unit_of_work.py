from abc import ABC, abstractmethod

from src.app.repositories.actor_repository import IActorRepository
from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.department_repository import IDepartmentRepository
from src.app.repositories.record_repository import IRecordRepository
from src.app.repositories.tenant_repository import ITenantRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    records: IRecordRepository
    tenants: ITenantRepository
    departments: IDepartmentRepository
    actors: IActorRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
