"""
Actor Context

Authenticated identity every authorization decision is made for. Built by
the authentication layer from the token subject and the stored actor.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.domain.entities.enums import ActorRole


class ActorContext(BaseModel):
    """Immutable actor snapshot passed to ScopeResolver and the engines"""

    model_config = ConfigDict(frozen=True)

    id: UUID
    role: ActorRole
    tenant_id: UUID
    department_id: Optional[UUID] = None
    is_platform_actor: bool = False
