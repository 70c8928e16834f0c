from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.context import LoadActorContextUseCase
from src.domain.actor_context import ActorContext

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def unit_of_work_factory() -> UnitOfWork:
    """Standalone unit of work for work outside a request (purge sweeps)"""
    return SqlAlchemyUnitOfWork(AsyncSessionLocal(), owns_session=True)


def get_unit_of_work_factory():
    return unit_of_work_factory


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ActorContext:
    """
    Resolve the bearer token into an ActorContext.

    Raises:
        ClientError: 401 if the token is invalid or the actor no longer exists
    """
    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        actor_id = UUID(str(payload["sub"]))
    except ValueError:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid token subject"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await LoadActorContextUseCase(uow).execute(actor_id)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)
    return result.value
