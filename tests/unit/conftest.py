import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.domain.actor_context import ActorContext
from src.domain.entities import ActorRole


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_actor():
    def _make(role=ActorRole.member, tenant_id=None, department_id=None, is_platform_actor=False):
        return ActorContext(
            id=uuid4(),
            role=role,
            tenant_id=tenant_id or uuid4(),
            department_id=department_id or uuid4(),
            is_platform_actor=is_platform_actor,
        )

    return _make
