"""
Authorization Matrix

Immutable table of (resource type, role) -> {operation -> scope}. Every
cell of the resource x role x operation cross product must be declared;
a missing cell is a boot failure, never a runtime default. Only the
(tenant, super_admin) row may reach scope ALL, and only platform actors
ever exercise it.
"""

from itertools import product
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from src.domain.entities.enums import ActorRole, Operation, ResourceType, Scope
from src.domain.errors import ConfigurationError

NONE = Scope.none
OWN = Scope.own
DEPT = Scope.department
TENANT = Scope.tenant
ALL = Scope.all

# The single row allowed to carry scope ALL
CROSS_TENANT_CELL = (ResourceType.tenant, ActorRole.super_admin)


def _ops(create: Scope, read: Scope, update: Scope, delete: Scope) -> Dict[Operation, Scope]:
    return {
        Operation.create: create,
        Operation.read: read,
        Operation.update: update,
        Operation.delete: delete,
    }


PERMISSIONS: Dict[ResourceType, Dict[ActorRole, Dict[Operation, Scope]]] = {
    ResourceType.tenant: {
        ActorRole.super_admin: _ops(ALL, ALL, ALL, ALL),
        ActorRole.admin: _ops(NONE, TENANT, NONE, NONE),
        ActorRole.manager: _ops(NONE, TENANT, NONE, NONE),
        ActorRole.member: _ops(NONE, TENANT, NONE, NONE),
    },
    ResourceType.department: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(NONE, TENANT, DEPT, NONE),
        ActorRole.manager: _ops(NONE, DEPT, NONE, NONE),
        ActorRole.member: _ops(NONE, DEPT, NONE, NONE),
    },
    ResourceType.actor: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, TENANT, DEPT, DEPT),
        ActorRole.manager: _ops(NONE, TENANT, OWN, NONE),
        ActorRole.member: _ops(NONE, DEPT, OWN, NONE),
    },
    ResourceType.task: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, DEPT, OWN),
        ActorRole.member: _ops(OWN, OWN, OWN, OWN),
    },
    ResourceType.task_activity: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, DEPT, OWN),
        ActorRole.member: _ops(OWN, DEPT, OWN, OWN),
    },
    ResourceType.task_comment: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, OWN, OWN),
        ActorRole.member: _ops(OWN, DEPT, OWN, OWN),
    },
    ResourceType.task_watcher: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, OWN, DEPT),
        ActorRole.member: _ops(OWN, DEPT, OWN, OWN),
    },
    ResourceType.attachment: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, OWN, OWN),
        ActorRole.member: _ops(OWN, DEPT, OWN, OWN),
    },
    ResourceType.material: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, DEPT, NONE),
        ActorRole.member: _ops(NONE, DEPT, NONE, NONE),
    },
    ResourceType.material_usage: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(DEPT, DEPT, DEPT, DEPT),
        ActorRole.manager: _ops(DEPT, DEPT, DEPT, OWN),
        ActorRole.member: _ops(OWN, DEPT, OWN, NONE),
    },
    ResourceType.vendor: {
        ActorRole.super_admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.admin: _ops(TENANT, TENANT, TENANT, TENANT),
        ActorRole.manager: _ops(NONE, TENANT, NONE, NONE),
        ActorRole.member: _ops(NONE, TENANT, NONE, NONE),
    },
    ResourceType.notification: {
        ActorRole.super_admin: _ops(TENANT, TENANT, OWN, TENANT),
        ActorRole.admin: _ops(DEPT, OWN, OWN, OWN),
        ActorRole.manager: _ops(DEPT, OWN, OWN, OWN),
        ActorRole.member: _ops(NONE, OWN, OWN, OWN),
    },
}


class AuthorizationMatrix:
    """Read-only, fully populated permission table"""

    def __init__(self, table: Mapping[ResourceType, Mapping[ActorRole, Mapping[Operation, Scope]]]):
        cells: Dict[Tuple[ResourceType, ActorRole, Operation], Scope] = {}
        for resource_type, roles in table.items():
            for role, operations in roles.items():
                for operation, scope in operations.items():
                    cells[(ResourceType(resource_type), ActorRole(role), Operation(operation))] = Scope(scope)
        self._validate(cells)
        self._cells = MappingProxyType(cells)

    def scope_for(
        self, resource_type: ResourceType, role: ActorRole, operation: Operation
    ) -> Optional[Scope]:
        """Declared scope, or None when the cell is absent"""
        return self._cells.get((resource_type, role, operation))

    def cells(self) -> Mapping[Tuple[ResourceType, ActorRole, Operation], Scope]:
        return self._cells

    def allowed_operations(self, resource_type: ResourceType, role: ActorRole) -> Dict[Operation, Scope]:
        """Operations a role may perform on a resource type, with their scopes"""
        allowed = {}
        for operation in Operation:
            scope = self._cells.get((resource_type, role, operation), NONE)
            if scope != NONE:
                allowed[operation] = scope
        return allowed

    @staticmethod
    def _validate(cells: Mapping[Tuple[ResourceType, ActorRole, Operation], Scope]):
        missing = [
            f"{resource_type.value}/{role.value}/{operation.value}"
            for resource_type, role, operation in product(ResourceType, ActorRole, Operation)
            if (resource_type, role, operation) not in cells
        ]
        if missing:
            raise ConfigurationError(
                f"Authorization matrix is missing {len(missing)} cell(s)",
                reason=", ".join(missing[:10]),
            )

        for (resource_type, role, operation), scope in cells.items():
            if scope == ALL and (resource_type, role) != CROSS_TENANT_CELL:
                raise ConfigurationError(
                    f"Scope ALL is reserved for {CROSS_TENANT_CELL[0].value}/{CROSS_TENANT_CELL[1].value}",
                    reason=f"{resource_type.value}/{role.value}/{operation.value}",
                )


def build_authorization_matrix(table: Optional[Mapping] = None) -> AuthorizationMatrix:
    return AuthorizationMatrix(PERMISSIONS if table is None else table)


AUTHORIZATION_MATRIX = build_authorization_matrix()
