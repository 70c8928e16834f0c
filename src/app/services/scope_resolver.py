"""
Scope Resolver

Single place where access is decided. Pure and side-effect free: reads the
immutable matrix and entity graph only, so request handlers may share one
instance without locking.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import and_, false, or_, true

from src.domain.actor_context import ActorContext
from src.domain.authorization_matrix import AUTHORIZATION_MATRIX, AuthorizationMatrix
from src.domain.entities.enums import Operation, ResourceType, Scope
from src.domain.entity_graph import ENTITY_GRAPH, EntityGraph
from src.domain.errors import AuthorizationDenied, NotFoundInScope

logger = logging.getLogger(__name__)


class Decision(BaseModel):
    """Outcome of an authorization check"""

    model_config = ConfigDict(frozen=True)

    allow: bool
    scope: Scope
    reason: str


class ScopeResolver:
    """
    Gate every access by role, scope, tenant, department and ownership.

    Decision rules:
    1. Scope NONE or an absent cell denies
    2. Without a target the declared scope is returned for query building
    3. With a target the scope is checked against the record
       - ALL only holds for platform actors on tenants, otherwise TENANT
       - TENANT: same tenant
       - DEPARTMENT: same tenant and same department
       - OWN: the record type's ownership predicate
    """

    def __init__(
        self,
        matrix: AuthorizationMatrix = AUTHORIZATION_MATRIX,
        graph: EntityGraph = ENTITY_GRAPH,
    ):
        self.matrix = matrix
        self.graph = graph

    def authorize(
        self,
        actor: ActorContext,
        resource_type: ResourceType,
        operation: Operation,
        target: Optional[Any] = None,
    ) -> Decision:
        declared = self.matrix.scope_for(resource_type, actor.role, operation)
        if declared is None or declared == Scope.none:
            return Decision(
                allow=False,
                scope=Scope.none,
                reason=f"Role {actor.role.value} cannot {operation.value} {resource_type.value}",
            )

        scope = self._effective_scope(actor, resource_type, declared)

        if target is None:
            return Decision(allow=True, scope=scope, reason=f"Granted at {scope.value} scope")

        if scope == Scope.all:
            return Decision(allow=True, scope=scope, reason="Platform cross-tenant access")

        if self._within_scope(actor, resource_type, scope, target):
            return Decision(allow=True, scope=scope, reason=f"Target within {scope.value} scope")

        return Decision(
            allow=False,
            scope=scope,
            reason=f"Target outside {scope.value} scope",
        )

    def require(
        self,
        actor: ActorContext,
        resource_type: ResourceType,
        operation: Operation,
        target: Optional[Any] = None,
    ) -> Decision:
        """
        Authorize or raise.

        Raises:
            AuthorizationDenied: role has no scope for the operation
            NotFoundInScope: target exists but is out of scope (reads as absent)
        """
        decision = self.authorize(actor, resource_type, operation, target)
        if decision.allow:
            return decision

        logger.warning(
            f"Denied {operation.value} on {resource_type.value} for actor {actor.id}: {decision.reason}"
        )
        if target is not None and decision.scope != Scope.none:
            raise NotFoundInScope(resource_type.value)
        raise AuthorizationDenied(decision.reason)

    def build_list_filter(
        self,
        actor: ActorContext,
        resource_type: ResourceType,
        operation: Operation = Operation.read,
    ):
        """
        SQL predicate restricting a list query to the actor's scope.

        Raises:
            AuthorizationDenied: role has no scope for the operation
        """
        decision = self.require(actor, resource_type, operation)
        node = self.graph.node(resource_type)
        model = node.model

        if decision.scope == Scope.all:
            return true()

        tenant_clause = getattr(model, node.tenant_field) == actor.tenant_id
        if decision.scope == Scope.tenant:
            return tenant_clause

        if decision.scope == Scope.department:
            if node.department_field is None or actor.department_id is None:
                return false()
            return and_(
                tenant_clause,
                getattr(model, node.department_field) == actor.department_id,
            )

        if decision.scope == Scope.own:
            owner_clauses = [
                getattr(model, record_field) == getattr(actor, actor_attribute)
                for record_field, actor_attribute in node.owner_fields
            ]
            return or_(*owner_clauses)

        return false()

    def owns(self, actor: ActorContext, resource_type: ResourceType, target: Any) -> bool:
        """Ownership predicate declared for the record type"""
        node = self.graph.node(resource_type)
        for record_field, actor_attribute in node.owner_fields:
            value = getattr(target, record_field, None)
            if value is not None and value == getattr(actor, actor_attribute):
                return True
        return False

    def _effective_scope(
        self, actor: ActorContext, resource_type: ResourceType, declared: Scope
    ) -> Scope:
        if declared == Scope.all and not (
            actor.is_platform_actor and resource_type == ResourceType.tenant
        ):
            return Scope.tenant
        return declared

    def _within_scope(
        self, actor: ActorContext, resource_type: ResourceType, scope: Scope, target: Any
    ) -> bool:
        same_tenant = self.graph.tenant_of(resource_type, target) == actor.tenant_id

        if scope == Scope.tenant:
            return same_tenant
        if scope == Scope.department:
            department_id = self.graph.department_of(resource_type, target)
            return (
                same_tenant
                and department_id is not None
                and department_id == actor.department_id
            )
        if scope == Scope.own:
            return self.owns(actor, resource_type, target)
        return False
