"""
Entity Graph

Static description of every record type: where its tenant and department
live, how ownership is decided, and which dependent types hang off it.
Built and validated once at import; the process refuses to start when the
graph is incomplete or cyclic.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from sqlmodel import SQLModel

from src.domain.entities import (
    MAX_COMMENT_DEPTH,
    Actor,
    Attachment,
    CascadePolicy,
    Department,
    Material,
    MaterialUsage,
    Notification,
    ResourceType,
    Task,
    TaskActivity,
    TaskComment,
    TaskStatus,
    TaskWatcher,
    Tenant,
    Vendor,
)
from src.domain.errors import ConfigurationError


@dataclass(frozen=True)
class EdgeSpec:
    """
    Parent -> child dependency.

    foreign_key: child field holding the parent id
    discriminator: (field, value) narrowing polymorphic children
    historical: (field, value) marking children that neither block nor get
        rewritten; they keep pointing at the deleted parent
    required_on_restore: the parent must be active for the child to be restored
    max_depth: bound for the self-referential edge, in nesting levels
    depth_field: child field storing its nesting level along the self edge,
        1 at the top
    """

    child: ResourceType
    foreign_key: str
    policy: CascadePolicy = CascadePolicy.soft_delete
    discriminator: Optional[Tuple[str, Any]] = None
    historical: Optional[Tuple[str, Any]] = None
    required_on_restore: bool = True
    max_depth: Optional[int] = None
    depth_field: Optional[str] = None


@dataclass(frozen=True)
class NodeSpec:
    """
    Record type declaration.

    owner_fields: (record_field, actor_attribute) pairs; the actor owns the
    record when any pair matches
    """

    resource_type: ResourceType
    model: Type[SQLModel]
    tenant_field: str
    department_field: Optional[str]
    owner_fields: Tuple[Tuple[str, str], ...]
    edges: Tuple[EdgeSpec, ...] = field(default_factory=tuple)


class EntityGraph:
    """Validated, read-only view over the node declarations"""

    def __init__(self, nodes: Mapping[ResourceType, NodeSpec]):
        self._nodes = MappingProxyType(dict(nodes))
        self._validate()
        self._order = tuple(self._topological_sort())
        parents: Dict[ResourceType, List[Tuple[ResourceType, EdgeSpec]]] = {
            resource_type: [] for resource_type in self._nodes
        }
        for node in self._nodes.values():
            for edge in node.edges:
                parents[edge.child].append((node.resource_type, edge))
        self._parents = MappingProxyType(
            {key: tuple(value) for key, value in parents.items()}
        )

    @property
    def resource_types(self) -> Tuple[ResourceType, ...]:
        return tuple(self._nodes.keys())

    def node(self, resource_type: ResourceType) -> NodeSpec:
        try:
            return self._nodes[resource_type]
        except KeyError:
            raise ConfigurationError(f"Unknown resource type: {resource_type}")

    def model(self, resource_type: ResourceType) -> Type[SQLModel]:
        return self.node(resource_type).model

    def edges_into(self, resource_type: ResourceType) -> Tuple[Tuple[ResourceType, EdgeSpec], ...]:
        """(parent_type, edge) pairs pointing at resource_type"""
        return self._parents[resource_type]

    def topological_order(self) -> Tuple[ResourceType, ...]:
        """Parents before children; self edges ignored"""
        return self._order

    def self_edge(self, resource_type: ResourceType) -> Optional[EdgeSpec]:
        for edge in self.node(resource_type).edges:
            if edge.child == resource_type:
                return edge
        return None

    def tenant_of(self, resource_type: ResourceType, record) -> Any:
        return getattr(record, self.node(resource_type).tenant_field)

    def department_of(self, resource_type: ResourceType, record) -> Any:
        department_field = self.node(resource_type).department_field
        if department_field is None:
            return None
        return getattr(record, department_field)

    def child_criteria(self, edge: EdgeSpec, parent_id) -> list:
        """SQL predicates selecting the children of one parent along an edge"""
        model = self.model(edge.child)
        criteria = [getattr(model, edge.foreign_key) == parent_id]
        if edge.discriminator is not None:
            disc_field, disc_value = edge.discriminator
            criteria.append(getattr(model, disc_field) == disc_value)
        return criteria

    def open_criteria(self, edge: EdgeSpec) -> list:
        """SQL predicates excluding historical children"""
        if edge.historical is None:
            return []
        model = self.model(edge.child)
        hist_field, hist_value = edge.historical
        return [getattr(model, hist_field) != hist_value]

    def edge_applies(self, edge: EdgeSpec, record) -> bool:
        """True when the record sits on this edge (discriminator matches)"""
        if edge.discriminator is None:
            return True
        disc_field, disc_value = edge.discriminator
        return getattr(record, disc_field) == disc_value

    def _validate(self):
        for resource_type in ResourceType:
            if resource_type not in self._nodes:
                raise ConfigurationError(f"Entity graph has no node for {resource_type.value}")

        for resource_type, node in self._nodes.items():
            if node.resource_type != resource_type:
                raise ConfigurationError(f"Node key mismatch for {resource_type.value}")
            fields = node.model.model_fields
            for field_name in filter(None, (node.tenant_field, node.department_field)):
                if field_name not in fields:
                    raise ConfigurationError(
                        f"{resource_type.value} has no field {field_name}"
                    )
            for record_field, _ in node.owner_fields:
                if record_field not in fields:
                    raise ConfigurationError(
                        f"{resource_type.value} ownership field {record_field} is missing"
                    )

            for edge in node.edges:
                if edge.child not in self._nodes:
                    raise ConfigurationError(
                        f"{resource_type.value} -> {edge.child.value}: unknown child"
                    )
                child_fields = self._nodes[edge.child].model.model_fields
                for field_name in filter(
                    None,
                    (
                        edge.foreign_key,
                        edge.discriminator and edge.discriminator[0],
                        edge.historical and edge.historical[0],
                        edge.depth_field,
                    ),
                ):
                    if field_name not in child_fields:
                        raise ConfigurationError(
                            f"{resource_type.value} -> {edge.child.value}: no field {field_name}"
                        )
                if edge.child == resource_type:
                    if edge.max_depth is None or edge.max_depth < 1:
                        raise ConfigurationError(
                            f"Self edge on {resource_type.value} needs a max_depth"
                        )
                    if edge.policy != CascadePolicy.soft_delete:
                        raise ConfigurationError(
                            f"Self edge on {resource_type.value} must soft delete"
                        )

    def _topological_sort(self) -> List[ResourceType]:
        indegree = {resource_type: 0 for resource_type in self._nodes}
        for node in self._nodes.values():
            for child in {edge.child for edge in node.edges if edge.child != node.resource_type}:
                indegree[child] += 1

        ready = [resource_type for resource_type in self._nodes if indegree[resource_type] == 0]
        order: List[ResourceType] = []
        while ready:
            current = ready.pop(0)
            order.append(current)
            children = {
                edge.child
                for edge in self._nodes[current].edges
                if edge.child != current
            }
            for child in sorted(children, key=lambda item: item.value):
                indegree[child] -= 1
                if indegree[child] == 0:
                    ready.append(child)

        if len(order) != len(self._nodes):
            cyclic = sorted(rt.value for rt, degree in indegree.items() if degree > 0)
            raise ConfigurationError(
                "Entity graph contains a cycle", reason=", ".join(cyclic)
            )
        return order


def _task_parent(resource_type: ResourceType) -> Tuple[str, ResourceType]:
    return ("parent_type", resource_type)


def default_nodes() -> Dict[ResourceType, NodeSpec]:
    """Declarations for every record type, edges in cascade order"""
    # Leaves first, actors after their work, departments last: by the time a
    # reassignment edge is reached its open children are already gone
    department_scoped = (
        ResourceType.task_watcher,
        ResourceType.task,
        ResourceType.task_activity,
        ResourceType.task_comment,
        ResourceType.attachment,
        ResourceType.material_usage,
        ResourceType.material,
        ResourceType.notification,
        ResourceType.actor,
    )
    tenant_scoped = (
        ResourceType.task_watcher,
        ResourceType.task,
        ResourceType.task_activity,
        ResourceType.task_comment,
        ResourceType.attachment,
        ResourceType.material_usage,
        ResourceType.material,
        ResourceType.notification,
        ResourceType.vendor,
        ResourceType.actor,
        ResourceType.department,
    )

    return {
        ResourceType.tenant: NodeSpec(
            resource_type=ResourceType.tenant,
            model=Tenant,
            tenant_field="id",
            department_field=None,
            owner_fields=(("id", "tenant_id"),),
            edges=tuple(EdgeSpec(child, "tenant_id") for child in tenant_scoped),
        ),
        ResourceType.department: NodeSpec(
            resource_type=ResourceType.department,
            model=Department,
            tenant_field="tenant_id",
            department_field="id",
            owner_fields=(("id", "department_id"), ("head_actor_id", "id")),
            edges=tuple(EdgeSpec(child, "department_id") for child in department_scoped),
        ),
        ResourceType.actor: NodeSpec(
            resource_type=ResourceType.actor,
            model=Actor,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("id", "id"),),
            edges=(
                EdgeSpec(ResourceType.task_watcher, "actor_id"),
                EdgeSpec(ResourceType.task, "created_by", required_on_restore=False),
                EdgeSpec(ResourceType.task_activity, "created_by", required_on_restore=False),
                EdgeSpec(ResourceType.task_comment, "created_by", required_on_restore=False),
                EdgeSpec(ResourceType.attachment, "uploaded_by", required_on_restore=False),
                EdgeSpec(ResourceType.material, "added_by", required_on_restore=False),
                EdgeSpec(ResourceType.notification, "created_by", required_on_restore=False),
            ),
        ),
        ResourceType.task: NodeSpec(
            resource_type=ResourceType.task,
            model=Task,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("created_by", "id"), ("assignee_id", "id")),
            edges=(
                EdgeSpec(ResourceType.task_watcher, "task_id"),
                EdgeSpec(ResourceType.task_activity, "task_id"),
                EdgeSpec(
                    ResourceType.task_comment,
                    "parent_id",
                    discriminator=_task_parent(ResourceType.task),
                ),
                EdgeSpec(
                    ResourceType.attachment,
                    "parent_id",
                    discriminator=_task_parent(ResourceType.task),
                ),
                EdgeSpec(ResourceType.material_usage, "task_id"),
                EdgeSpec(
                    ResourceType.notification,
                    "entity_id",
                    discriminator=("entity_type", ResourceType.task),
                    required_on_restore=False,
                ),
            ),
        ),
        ResourceType.task_activity: NodeSpec(
            resource_type=ResourceType.task_activity,
            model=TaskActivity,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("created_by", "id"),),
            edges=(
                EdgeSpec(
                    ResourceType.task_comment,
                    "parent_id",
                    discriminator=_task_parent(ResourceType.task_activity),
                ),
                EdgeSpec(
                    ResourceType.attachment,
                    "parent_id",
                    discriminator=_task_parent(ResourceType.task_activity),
                ),
            ),
        ),
        ResourceType.task_comment: NodeSpec(
            resource_type=ResourceType.task_comment,
            model=TaskComment,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("created_by", "id"),),
            edges=(
                EdgeSpec(
                    ResourceType.task_comment,
                    "parent_id",
                    discriminator=_task_parent(ResourceType.task_comment),
                    max_depth=MAX_COMMENT_DEPTH,
                    depth_field="depth",
                ),
                EdgeSpec(
                    ResourceType.attachment,
                    "parent_id",
                    discriminator=_task_parent(ResourceType.task_comment),
                ),
            ),
        ),
        ResourceType.task_watcher: NodeSpec(
            resource_type=ResourceType.task_watcher,
            model=TaskWatcher,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("actor_id", "id"),),
        ),
        ResourceType.attachment: NodeSpec(
            resource_type=ResourceType.attachment,
            model=Attachment,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("uploaded_by", "id"),),
        ),
        ResourceType.material: NodeSpec(
            resource_type=ResourceType.material,
            model=Material,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("added_by", "id"),),
            edges=(
                EdgeSpec(
                    ResourceType.material_usage,
                    "material_id",
                    policy=CascadePolicy.require_reassignment,
                    historical=("consumed", True),
                ),
            ),
        ),
        ResourceType.material_usage: NodeSpec(
            resource_type=ResourceType.material_usage,
            model=MaterialUsage,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("recorded_by", "id"),),
        ),
        ResourceType.vendor: NodeSpec(
            resource_type=ResourceType.vendor,
            model=Vendor,
            tenant_field="tenant_id",
            department_field=None,
            owner_fields=(("created_by", "id"),),
            edges=(
                EdgeSpec(
                    ResourceType.task,
                    "vendor_id",
                    policy=CascadePolicy.require_reassignment,
                    historical=("status", TaskStatus.completed),
                ),
                EdgeSpec(
                    ResourceType.material,
                    "vendor_id",
                    policy=CascadePolicy.block_if_exists,
                ),
            ),
        ),
        ResourceType.notification: NodeSpec(
            resource_type=ResourceType.notification,
            model=Notification,
            tenant_field="tenant_id",
            department_field="department_id",
            owner_fields=(("recipient_id", "id"), ("created_by", "id")),
        ),
    }


def build_entity_graph(nodes: Optional[Mapping[ResourceType, NodeSpec]] = None) -> EntityGraph:
    return EntityGraph(default_nodes() if nodes is None else nodes)


ENTITY_GRAPH = build_entity_graph()
