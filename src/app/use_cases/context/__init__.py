"""Actor context use cases."""

from .load_actor_context_use_case import LoadActorContextUseCase

__all__ = ["LoadActorContextUseCase"]
