"""
Unit tests for CascadeEngine

Repositories are mocked; the SQLite integration suite covers full cascades.
"""

from uuid import uuid4
from unittest.mock import AsyncMock

import pytest

from src.app.services.cascade_engine import CascadeEngine, CascadeResult
from src.domain.entities import (
    ActorRole,
    LifecycleAction,
    ResourceType,
    Task,
    TaskComment,
    TaskStatus,
    TaskType,
    Tenant,
    Vendor,
)
from src.domain.errors import (
    ConflictBlockedByChildren,
    InvalidReassignment,
    InvariantViolation,
    LifecycleConflict,
)


def make_vendor(tenant_id=None):
    return Vendor(id=uuid4(), tenant_id=tenant_id or uuid4(), name="Supplier", created_by=uuid4())


def make_project_task(vendor):
    return Task(
        id=uuid4(),
        tenant_id=vendor.tenant_id,
        department_id=uuid4(),
        title="Install pumps",
        task_type=TaskType.project,
        status=TaskStatus.in_progress,
        vendor_id=vendor.id,
        created_by=uuid4(),
    )


@pytest.fixture
def engine():
    return CascadeEngine()


@pytest.mark.asyncio
async def test_deleting_deleted_root_conflicts(engine, mock_uow, make_actor):
    vendor = make_vendor()
    vendor.is_deleted = True

    with pytest.raises(LifecycleConflict):
        await engine.cascade_delete(ResourceType.vendor, vendor, make_actor(), mock_uow)


@pytest.mark.asyncio
async def test_platform_tenant_is_undeletable(engine, mock_uow, make_actor):
    platform = Tenant(id=uuid4(), name="Platform", is_platform=True)
    mock_uow.records.transition = AsyncMock(return_value=True)

    with pytest.raises(InvariantViolation):
        await engine.cascade_delete(
            ResourceType.tenant,
            platform,
            make_actor(role=ActorRole.super_admin, is_platform_actor=True),
            mock_uow,
        )

    mock_uow.records.transition.assert_not_awaited()


@pytest.mark.asyncio
async def test_vendor_with_open_project_task_is_blocked(engine, mock_uow, make_actor):
    vendor = make_vendor()
    task = make_project_task(vendor)
    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(return_value=[task])

    with pytest.raises(ConflictBlockedByChildren) as exc_info:
        await engine.cascade_delete(ResourceType.vendor, vendor, make_actor(), mock_uow)

    assert exc_info.value.child_type == ResourceType.task.value
    assert exc_info.value.child_ids == [str(task.id)]
    assert exc_info.value.error.details["child_ids"] == [str(task.id)]
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_vendor_reassignment_rewrites_open_tasks(engine, mock_uow, make_actor):
    vendor = make_vendor()
    replacement = make_vendor(tenant_id=vendor.tenant_id)
    task = make_project_task(vendor)

    async def list_children(resource_type, criteria=(), mode=None, limit=None, offset=0):
        return [task] if resource_type == ResourceType.task else []

    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(side_effect=list_children)
    mock_uow.records.get_by_id = AsyncMock(return_value=replacement)
    mock_uow.records.reassign = AsyncMock(return_value=1)

    result = await engine.cascade_delete(
        ResourceType.vendor,
        vendor,
        make_actor(),
        mock_uow,
        reassignments={vendor.id: replacement.id},
    )

    assert result.deleted_ids == [vendor.id]
    assert result.reassigned_ids == [task.id]
    mock_uow.records.reassign.assert_awaited_once_with(
        ResourceType.task, [task.id], "vendor_id", replacement.id
    )


@pytest.mark.asyncio
async def test_reassignment_to_itself_is_rejected(engine, mock_uow, make_actor):
    vendor = make_vendor()
    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(return_value=[make_project_task(vendor)])

    with pytest.raises(InvalidReassignment):
        await engine.cascade_delete(
            ResourceType.vendor, vendor, make_actor(), mock_uow, reassignments={vendor.id: vendor.id}
        )


@pytest.mark.asyncio
async def test_reassignment_across_tenants_is_rejected(engine, mock_uow, make_actor):
    vendor = make_vendor()
    foreign = make_vendor()
    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(return_value=[make_project_task(vendor)])
    mock_uow.records.get_by_id = AsyncMock(return_value=foreign)

    with pytest.raises(InvalidReassignment):
        await engine.cascade_delete(
            ResourceType.vendor, vendor, make_actor(), mock_uow, reassignments={vendor.id: foreign.id}
        )


@pytest.mark.asyncio
async def test_comment_nesting_is_bounded(engine, mock_uow, make_actor):
    """An endless reply chain stops at the declared depth instead of recursing forever"""
    tenant_id, department_id = uuid4(), uuid4()

    def make_comment():
        return TaskComment(
            id=uuid4(),
            tenant_id=tenant_id,
            department_id=department_id,
            parent_id=uuid4(),
            parent_type=ResourceType.task_comment,
            created_by=uuid4(),
        )

    async def list_children(resource_type, criteria=(), mode=None, limit=None, offset=0):
        return [make_comment()] if resource_type == ResourceType.task_comment else []

    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(side_effect=list_children)

    with pytest.raises(InvariantViolation):
        await engine.cascade_delete(ResourceType.task_comment, make_comment(), make_actor(), mock_uow)


def make_thread(task, depths):
    """One comment per depth, each replying to the previous one"""
    comments, parent_id, parent_type = [], task.id, ResourceType.task
    for depth in depths:
        comment = TaskComment(
            id=uuid4(),
            tenant_id=task.tenant_id,
            department_id=task.department_id,
            parent_id=parent_id,
            parent_type=parent_type,
            depth=depth,
            created_by=uuid4(),
        )
        comments.append(comment)
        parent_id, parent_type = comment.id, ResourceType.task_comment
    return comments


def list_thread(comments):
    """Each task_comment lookup returns the next reply in the thread"""
    pending = [[comment] for comment in comments]

    async def list_children(resource_type, criteria=(), mode=None, limit=None, offset=0):
        if resource_type == ResourceType.task_comment and pending:
            return pending.pop(0)
        return []

    return list_children


@pytest.mark.asyncio
async def test_thread_at_maximum_depth_is_deleted_with_its_task(engine, mock_uow, make_actor):
    task = make_project_task(make_vendor())
    thread = make_thread(task, [1, 2, 3])
    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(side_effect=list_thread(thread))

    result = await engine.cascade_delete(ResourceType.task, task, make_actor(), mock_uow)

    assert result.deleted_ids == [task.id] + [comment.id for comment in thread]


@pytest.mark.asyncio
async def test_fourth_comment_level_under_a_task_is_rejected(engine, mock_uow, make_actor):
    task = make_project_task(make_vendor())
    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(side_effect=list_thread(make_thread(task, [1, 2, 3, 4])))

    with pytest.raises(InvariantViolation) as exc_info:
        await engine.cascade_delete(ResourceType.task, task, make_actor(), mock_uow)

    assert "nesting exceeds 3 levels" in exc_info.value.error.message


@pytest.mark.asyncio
async def test_nesting_starts_from_the_stored_depth_of_the_root(engine, mock_uow, make_actor):
    task = make_project_task(make_vendor())
    deep_reply, below = make_thread(task, [3, 1])
    mock_uow.records.transition = AsyncMock(return_value=True)
    mock_uow.records.list = AsyncMock(side_effect=list_thread([below]))

    with pytest.raises(InvariantViolation):
        await engine.cascade_delete(ResourceType.task_comment, deep_reply, make_actor(), mock_uow)


@pytest.mark.asyncio
async def test_root_lost_to_concurrent_delete_conflicts(engine, mock_uow, make_actor):
    mock_uow.records.transition = AsyncMock(return_value=False)

    with pytest.raises(LifecycleConflict):
        await engine.cascade_delete(ResourceType.vendor, make_vendor(), make_actor(), mock_uow)


@pytest.mark.asyncio
async def test_restoring_active_root_conflicts(engine, mock_uow, make_actor):
    with pytest.raises(LifecycleConflict):
        await engine.cascade_restore(ResourceType.vendor, make_vendor(), make_actor(), mock_uow)


@pytest.mark.asyncio
async def test_restore_requires_active_parent(engine, mock_uow, make_actor):
    task = make_project_task(make_vendor())
    task.is_deleted = True
    task.deletion_batch_id = uuid4()
    deleted_parent = Tenant(id=task.tenant_id, name="Gone", is_deleted=True)
    mock_uow.records.get_by_id = AsyncMock(return_value=deleted_parent)
    mock_uow.records.transition = AsyncMock(return_value=True)

    with pytest.raises(InvariantViolation):
        await engine.cascade_restore(ResourceType.task, task, make_actor(), mock_uow)

    mock_uow.records.transition.assert_not_awaited()


def test_cascade_result_groups_effects():
    result = CascadeResult(batch_id=uuid4())
    deleted, reassigned = uuid4(), uuid4()
    result.add(ResourceType.vendor, deleted, LifecycleAction.deleted)
    result.add(ResourceType.task, reassigned, LifecycleAction.reassigned)

    assert result.deleted_ids == [deleted]
    assert result.reassigned_ids == [reassigned]
    assert result.restored_ids == []
