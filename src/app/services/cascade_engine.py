"""
Cascade Engine

Graph-driven delete and restore. Every call runs inside the caller's unit of
work and never commits: the use case commits once the whole cascade has
succeeded, and any raised error leaves the transaction to be rolled back,
so a partial cascade is never visible.

Edge policies on delete:
- soft_delete: recurse into every active child, same batch
- block_if_exists: any active child aborts the cascade
- require_reassignment: active children are moved to a replacement record
  supplied by the caller, otherwise the cascade aborts; historical
  children keep pointing at the deleted record
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel

from src.app.services.lifecycle_engine import LifecycleEngine
from src.app.services.lifecycle_invariants import assert_deletable, assert_platform_slot_free
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor_context import ActorContext
from src.domain.entities import CascadePolicy, LifecycleAction, ReadMode, ResourceType
from src.domain.entity_graph import ENTITY_GRAPH, EdgeSpec, EntityGraph
from src.domain.errors import (
    ConflictBlockedByChildren,
    InvalidReassignment,
    InvariantViolation,
    LifecycleConflict,
)

logger = logging.getLogger(__name__)


class CascadeEffect(BaseModel):
    """One record touched by a cascade, handed to post-commit consumers"""

    entity_type: ResourceType
    entity_id: UUID
    action: LifecycleAction


class CascadeResult(BaseModel):
    batch_id: Optional[UUID] = None
    effects: List[CascadeEffect] = []

    def add(self, entity_type: ResourceType, entity_id: UUID, action: LifecycleAction):
        self.effects.append(
            CascadeEffect(entity_type=entity_type, entity_id=entity_id, action=action)
        )

    def _ids(self, action: LifecycleAction) -> List[UUID]:
        return [effect.entity_id for effect in self.effects if effect.action == action]

    @property
    def deleted_ids(self) -> List[UUID]:
        return self._ids(LifecycleAction.deleted)

    @property
    def restored_ids(self) -> List[UUID]:
        return self._ids(LifecycleAction.restored)

    @property
    def reassigned_ids(self) -> List[UUID]:
        return self._ids(LifecycleAction.reassigned)


VisitKey = Tuple[ResourceType, UUID]


class CascadeEngine:
    def __init__(
        self,
        graph: EntityGraph = ENTITY_GRAPH,
        lifecycle: Optional[LifecycleEngine] = None,
    ):
        self.graph = graph
        self.lifecycle = lifecycle or LifecycleEngine()

    async def cascade_delete(
        self,
        resource_type: ResourceType,
        root: Any,
        actor: ActorContext,
        uow: UnitOfWork,
        reassignments: Optional[Mapping[UUID, UUID]] = None,
    ) -> CascadeResult:
        """
        Soft delete a record and everything that depends on it.

        Args:
            reassignments: deleted record id -> replacement record id, used by
                require_reassignment edges

        Raises:
            LifecycleConflict: root already deleted (or deleted concurrently)
            InvariantViolation: root is structurally undeletable
            ConflictBlockedByChildren: an edge blocked the cascade
            InvalidReassignment: a replacement is unusable
        """
        if root.is_deleted:
            raise LifecycleConflict(
                f"{resource_type.value} is already deleted",
                reason="Restore it before deleting again",
            )

        await assert_deletable(resource_type, root, uow)
        level = self._nesting_level(resource_type, root, inherited=1)

        result = CascadeResult(batch_id=uuid4())
        logger.info(
            f"Cascade delete of {resource_type.value} {root.id} by {actor.id} "
            f"(batch {result.batch_id})"
        )

        deleted = await self._delete(
            resource_type,
            root,
            actor.id,
            result,
            uow,
            dict(reassignments or {}),
            visited=set(),
            level=level,
        )
        if not deleted:
            raise LifecycleConflict(
                f"{resource_type.value} was deleted concurrently",
                reason="Record is no longer active",
            )

        logger.info(
            f"Cascade delete of {resource_type.value} {root.id} touched "
            f"{len(result.effects)} record(s)"
        )
        return result

    async def cascade_restore(
        self,
        resource_type: ResourceType,
        root: Any,
        actor: ActorContext,
        uow: UnitOfWork,
        cascade_children: bool = False,
    ) -> CascadeResult:
        """
        Restore a record and, optionally, the descendants deleted in its batch.

        Raises:
            LifecycleConflict: root is not deleted
            InvariantViolation: a required parent is deleted, or restoring
                would create a second platform tenant
        """
        if not root.is_deleted:
            raise LifecycleConflict(
                f"{resource_type.value} is not deleted",
                reason="Only deleted records can be restored",
            )

        if resource_type == ResourceType.tenant:
            await assert_platform_slot_free(root, uow)
        await self._assert_parents_active(resource_type, root, uow)

        batch_id = root.deletion_batch_id
        result = CascadeResult(batch_id=batch_id)
        logger.info(
            f"Restore of {resource_type.value} {root.id} by {actor.id} "
            f"(batch {batch_id}, cascade_children={cascade_children})"
        )

        await self.lifecycle.restore(resource_type, root, actor.id, uow)
        result.add(resource_type, root.id, LifecycleAction.restored)

        if cascade_children and batch_id is not None:
            descendants = await self._collect_batch(resource_type, root, batch_id, uow)
            for child_type, child in descendants:
                await self._assert_parents_active(child_type, child, uow)
                await self.lifecycle.restore(child_type, child, actor.id, uow)
                result.add(child_type, child.id, LifecycleAction.restored)

        logger.info(
            f"Restore of {resource_type.value} {root.id} restored "
            f"{len(result.restored_ids)} record(s)"
        )
        return result

    async def _delete(
        self,
        resource_type: ResourceType,
        record: Any,
        actor_id: UUID,
        result: CascadeResult,
        uow: UnitOfWork,
        reassignments: Dict[UUID, UUID],
        visited: Set[VisitKey],
        level: int,
    ) -> bool:
        key = (resource_type, record.id)
        if key in visited:
            return False
        visited.add(key)

        if not await self.lifecycle.mark_deleted(
            resource_type, record, actor_id, result.batch_id, uow
        ):
            return False
        result.add(resource_type, record.id, LifecycleAction.deleted)

        for edge in self.graph.node(resource_type).edges:
            if edge.policy == CascadePolicy.soft_delete:
                await self._delete_children(
                    resource_type, record, edge, actor_id, result, uow,
                    reassignments, visited, level,
                )
            elif edge.policy == CascadePolicy.block_if_exists:
                blockers = await self._open_children(record, edge, uow)
                if blockers:
                    logger.warning(
                        f"Delete of {resource_type.value} {record.id} blocked by "
                        f"{len(blockers)} {edge.child.value} record(s)"
                    )
                    raise ConflictBlockedByChildren(
                        resource_type.value, edge.child.value, [child.id for child in blockers]
                    )
            elif edge.policy == CascadePolicy.require_reassignment:
                await self._reassign_children(
                    resource_type, record, edge, result, uow, reassignments
                )
        return True

    async def _delete_children(
        self,
        resource_type: ResourceType,
        record: Any,
        edge: EdgeSpec,
        actor_id: UUID,
        result: CascadeResult,
        uow: UnitOfWork,
        reassignments: Dict[UUID, UUID],
        visited: Set[VisitKey],
        level: int,
    ):
        children = await uow.records.list(
            edge.child, self.graph.child_criteria(edge, record.id)
        )
        if not children:
            return

        inherited = level + 1 if edge.child == resource_type else 1
        for child in children:
            child_level = self._nesting_level(edge.child, child, inherited)
            await self._delete(
                edge.child, child, actor_id, result, uow, reassignments, visited, child_level
            )

    def _nesting_level(self, resource_type: ResourceType, record: Any, inherited: int) -> int:
        """
        Level of a record among nested records of its own type, 1 at the top.

        The deeper of the level reached by the cascade and the level stored on
        the record wins, so a cascade entered mid-thread is bounded too.
        """
        edge = self.graph.self_edge(resource_type)
        if edge is None:
            return inherited
        level = inherited
        if edge.depth_field is not None:
            level = max(level, getattr(record, edge.depth_field) or 1)
        if level > edge.max_depth:
            raise InvariantViolation(
                f"{resource_type.value} nesting exceeds {edge.max_depth} levels",
                reason=f"{resource_type.value} {record.id}",
            )
        return level

    async def _open_children(self, record: Any, edge: EdgeSpec, uow: UnitOfWork) -> list:
        criteria = self.graph.child_criteria(edge, record.id) + self.graph.open_criteria(edge)
        return await uow.records.list(edge.child, criteria)

    async def _reassign_children(
        self,
        resource_type: ResourceType,
        record: Any,
        edge: EdgeSpec,
        result: CascadeResult,
        uow: UnitOfWork,
        reassignments: Dict[UUID, UUID],
    ):
        children = await self._open_children(record, edge, uow)
        if not children:
            return

        replacement_id = reassignments.get(record.id)
        if replacement_id is None:
            logger.warning(
                f"Delete of {resource_type.value} {record.id} needs a reassignment "
                f"for {len(children)} {edge.child.value} record(s)"
            )
            raise ConflictBlockedByChildren(
                resource_type.value, edge.child.value, [child.id for child in children]
            )

        await self._assert_valid_replacement(resource_type, record, replacement_id, uow)

        child_ids = [child.id for child in children]
        await uow.records.reassign(edge.child, child_ids, edge.foreign_key, replacement_id)
        for child_id in child_ids:
            result.add(edge.child, child_id, LifecycleAction.reassigned)

    async def _assert_valid_replacement(
        self,
        resource_type: ResourceType,
        record: Any,
        replacement_id: UUID,
        uow: UnitOfWork,
    ):
        if replacement_id == record.id:
            raise InvalidReassignment(
                f"Cannot reassign to the {resource_type.value} being deleted"
            )

        replacement = await uow.records.get_by_id(resource_type, replacement_id)
        if replacement is None or self.graph.tenant_of(
            resource_type, replacement
        ) != self.graph.tenant_of(resource_type, record):
            raise InvalidReassignment(
                f"Replacement {resource_type.value} not found",
                reason=f"Must be an active {resource_type.value} of the same tenant",
            )

    async def _collect_batch(
        self,
        resource_type: ResourceType,
        root: Any,
        batch_id: UUID,
        uow: UnitOfWork,
    ) -> List[Tuple[ResourceType, Any]]:
        """
        Deleted descendants stamped with the batch, parents before children.

        Records are ordered by graph order, then by how deep they nest
        under another record of their own type in the same batch.
        """
        visited: Set[VisitKey] = {(resource_type, root.id)}
        found: List[Tuple[ResourceType, Any]] = []
        queue: List[Tuple[ResourceType, Any]] = [(resource_type, root)]

        while queue:
            parent_type, parent = queue.pop(0)
            for edge in self.graph.node(parent_type).edges:
                if edge.policy != CascadePolicy.soft_delete:
                    continue
                model = self.graph.model(edge.child)
                criteria = self.graph.child_criteria(edge, parent.id) + [
                    model.deletion_batch_id == batch_id
                ]
                children = await uow.records.list(
                    edge.child, criteria, mode=ReadMode.only_deleted
                )
                for child in children:
                    key = (edge.child, child.id)
                    if key in visited:
                        continue
                    visited.add(key)
                    found.append((edge.child, child))
                    queue.append((edge.child, child))

        order = {rt: index for index, rt in enumerate(self.graph.topological_order())}
        by_key = {(rt, record.id): record for rt, record in found}
        return sorted(
            found,
            key=lambda item: (order[item[0]], self._self_depth(item[0], item[1], by_key)),
        )

    def _self_depth(self, resource_type: ResourceType, record: Any, batch: Dict[VisitKey, Any]) -> int:
        """Number of same-type ancestors of a record that are also in the batch"""
        depth = 0
        seen = {record.id}
        current = record
        while True:
            parent = None
            for edge in self.graph.node(resource_type).edges:
                if edge.child != resource_type or not self.graph.edge_applies(edge, current):
                    continue
                parent = batch.get((resource_type, getattr(current, edge.foreign_key)))
                if parent is not None:
                    break
            if parent is None or parent.id in seen:
                return depth
            seen.add(parent.id)
            depth += 1
            current = parent

    async def _assert_parents_active(self, resource_type: ResourceType, record: Any, uow: UnitOfWork):
        """Structural parents must be active before a record comes back"""
        for parent_type, edge in self.graph.edges_into(resource_type):
            if edge.policy != CascadePolicy.soft_delete or not edge.required_on_restore:
                continue
            if not self.graph.edge_applies(edge, record):
                continue

            parent_id = getattr(record, edge.foreign_key)
            if parent_id is None:
                continue

            parent = await uow.records.get_by_id(
                parent_type, parent_id, mode=ReadMode.include_deleted
            )
            if parent is not None and parent.is_deleted:
                raise InvariantViolation(
                    f"Cannot restore {resource_type.value}: its {parent_type.value} is deleted",
                    reason=f"Restore {parent_type.value} {parent_id} first",
                )
