"""
Cascade delete and restore against a real database.

Runs the record use cases over SqlAlchemyUnitOfWork so conditional updates,
visibility filters and batch bookkeeping are exercised end to end.
"""

import pytest
from sqlmodel import select

from src.app.use_cases.records import (
    DeleteRecordCommand,
    DeleteRecordUseCase,
    RestoreRecordCommand,
    RestoreRecordUseCase,
)
from src.domain.entities import (
    Actor,
    Attachment,
    AuditEvent,
    Department,
    Material,
    MaterialUsage,
    Notification,
    ResourceType,
    Task,
    TaskActivity,
    TaskComment,
    TaskWatcher,
    Tenant,
    Vendor,
)
from tests.integration.seed import load

LIFECYCLE_FIELDS = {
    "is_deleted",
    "deleted_at",
    "deleted_by",
    "restored_at",
    "restored_by",
    "restore_count",
    "deletion_batch_id",
}


async def delete(uow, actor, resource_type, record_id, reassignments=None):
    return await DeleteRecordUseCase(uow).execute(
        actor,
        DeleteRecordCommand(
            resource_type=resource_type,
            record_id=record_id,
            reassignments=reassignments or {},
        ),
    )


async def restore(uow, actor, resource_type, record_id, cascade_children=False):
    return await RestoreRecordUseCase(uow).execute(
        actor,
        RestoreRecordCommand(
            resource_type=resource_type,
            record_id=record_id,
            cascade_children=cascade_children,
        ),
    )


def t1_records(world):
    return [
        (Tenant, world.t1_id),
        (Department, world.d1_id),
        (Department, world.d2_id),
        (Actor, world.s.id),
        (Actor, world.u1.id),
        (Actor, world.u2.id),
        (Actor, world.u3.id),
        (Vendor, world.vendor_id),
        (Vendor, world.vendor_2_id),
        (Task, world.k1_id),
        (Task, world.k2_id),
        (Task, world.kc_id),
        (Task, world.k3_id),
        (TaskActivity, world.activity_id),
        (TaskComment, world.comment_id),
        (TaskComment, world.reply_id),
        (Attachment, world.attachment_id),
        (Material, world.material_id),
        (MaterialUsage, world.usage_id),
        (Notification, world.notification_id),
    ]


@pytest.mark.asyncio
async def test_tenant_delete_cascades_to_every_record_with_one_batch(db_session, uow, world):
    result = await delete(uow, world.platform_admin, ResourceType.tenant, world.t1_id)

    assert result.is_ok()
    batch_id = result.value.batch_id
    assert batch_id is not None

    for model, record_id in t1_records(world):
        record = await load(db_session, model, record_id)
        assert record.is_deleted is True, f"{model.__name__} {record_id}"
        assert record.deletion_batch_id == batch_id
        assert record.deleted_by == world.platform_admin.id

    # Other tenants are untouched
    for model, record_id in [
        (Tenant, world.t2_id),
        (Actor, world.t2_admin.id),
        (Vendor, world.t2_vendor_id),
        (Task, world.t2_task_id),
        (Tenant, world.platform_id),
    ]:
        record = await load(db_session, model, record_id)
        assert record.is_deleted is False

    # Audit event shares the batch id
    events = (
        await db_session.execute(
            select(AuditEvent).where(AuditEvent.deletion_batch_id == batch_id)
        )
    ).scalars().all()
    assert [event.action for event in events] == ["record_deleted"]
    assert len(events[0].event_metadata["deleted"]) == len(t1_records(world))


@pytest.mark.asyncio
async def test_restore_with_children_only_restores_its_own_batch(db_session, uow, world):
    # Arrange: K2 deleted on its own before the tenant goes
    earlier = await delete(uow, world.u3, ResourceType.task, world.k2_id)
    assert earlier.is_ok()
    tenant_delete = await delete(uow, world.platform_admin, ResourceType.tenant, world.t1_id)
    assert tenant_delete.is_ok()

    # Act
    result = await restore(
        uow, world.platform_admin, ResourceType.tenant, world.t1_id, cascade_children=True
    )

    # Assert
    assert result.is_ok()
    assert result.value.batch_id == tenant_delete.value.batch_id

    for model, record_id in t1_records(world):
        record = await load(db_session, model, record_id)
        if record_id == world.k2_id:
            assert record.is_deleted is True
            assert record.deletion_batch_id == earlier.value.batch_id
        else:
            assert record.is_deleted is False, f"{model.__name__} {record_id}"
            assert record.deletion_batch_id is None
            assert record.restore_count == 1


@pytest.mark.asyncio
async def test_restore_without_children_leaves_batch_deleted(db_session, uow, world):
    deleted = await delete(uow, world.u2, ResourceType.task, world.k1_id)
    assert deleted.is_ok()

    result = await restore(uow, world.u2, ResourceType.task, world.k1_id)

    assert result.is_ok()
    assert (await load(db_session, Task, world.k1_id)).is_deleted is False
    assert (await load(db_session, TaskComment, world.comment_id)).is_deleted is True
    assert (await load(db_session, MaterialUsage, world.usage_id)).is_deleted is True


@pytest.mark.asyncio
async def test_delete_then_restore_gives_back_the_same_record(db_session, uow, world):
    def snapshot(record):
        return record.model_dump(exclude=LIFECYCLE_FIELDS)

    before = {
        (model, record_id): snapshot(await load(db_session, model, record_id))
        for model, record_id in [
            (Task, world.k1_id),
            (TaskActivity, world.activity_id),
            (TaskComment, world.comment_id),
            (TaskComment, world.reply_id),
            (Attachment, world.attachment_id),
            (MaterialUsage, world.usage_id),
            (Notification, world.notification_id),
        ]
    }

    deleted = await delete(uow, world.u2, ResourceType.task, world.k1_id)
    assert deleted.is_ok()
    assert {effect.entity_id for effect in deleted.value.effects} == {
        record_id for _, record_id in before
    }

    restored = await restore(uow, world.u2, ResourceType.task, world.k1_id, cascade_children=True)
    assert restored.is_ok()

    for (model, record_id), expected in before.items():
        record = await load(db_session, model, record_id)
        assert record.is_deleted is False
        assert record.restored_by == world.u2.id
        assert snapshot(record) == expected


@pytest.mark.asyncio
async def test_second_delete_no_longer_finds_the_record(uow, world):
    assert (await delete(uow, world.u2, ResourceType.task, world.k1_id)).is_ok()

    result = await delete(uow, world.u2, ResourceType.task, world.k1_id)

    # A deleted record is invisible to the active read
    assert result.is_err()
    assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_restoring_active_record_is_a_lifecycle_conflict(uow, world):
    result = await restore(uow, world.u2, ResourceType.task, world.k1_id)

    assert result.is_err()
    assert result.error.code == "LIFECYCLE_CONFLICT"


@pytest.mark.asyncio
async def test_child_cannot_come_back_before_its_department(db_session, uow, world):
    department_delete = await delete(uow, world.s, ResourceType.department, world.d1_id)
    assert department_delete.is_ok()

    result = await restore(uow, world.s, ResourceType.task, world.k2_id)

    assert result.is_err()
    assert result.error.code == "INVARIANT_VIOLATION"
    assert (await load(db_session, Task, world.k2_id)).is_deleted is True


@pytest.mark.asyncio
async def test_department_scenario(db_session, uow, world):
    """Deleting D1 cascades to its tasks; D2 is then the last department"""
    result = await delete(uow, world.s, ResourceType.department, world.d1_id)

    assert result.is_ok()
    for record_id in (world.k1_id, world.k2_id, world.kc_id):
        assert (await load(db_session, Task, record_id)).is_deleted is True
    for actor in (world.u1, world.u2, world.u3):
        assert (await load(db_session, Actor, actor.id)).is_deleted is True
    assert (await load(db_session, Task, world.k3_id)).is_deleted is False

    last = await delete(uow, world.s, ResourceType.department, world.d2_id)

    assert last.is_err()
    assert last.error.code == "INVARIANT_VIOLATION"
    assert (await load(db_session, Department, world.d2_id)).is_deleted is False


@pytest.mark.asyncio
async def test_department_of_the_only_super_admin_cannot_be_deleted(db_session, uow, world):
    """S is T1's only super admin and sits in D2, while D1 is still active"""
    result = await delete(uow, world.s, ResourceType.department, world.d2_id)

    assert result.is_err()
    assert result.error.code == "INVARIANT_VIOLATION"
    assert (await load(db_session, Department, world.d2_id)).is_deleted is False
    assert (await load(db_session, Actor, world.s.id)).is_deleted is False
    assert (await load(db_session, Task, world.k3_id)).is_deleted is False


@pytest.mark.asyncio
async def test_last_super_admin_cannot_be_deleted(db_session, uow, world):
    result = await delete(uow, world.s, ResourceType.actor, world.s.id)

    assert result.is_err()
    assert result.error.code == "INVARIANT_VIOLATION"
    assert (await load(db_session, Actor, world.s.id)).is_deleted is False


@pytest.mark.asyncio
async def test_last_head_of_department_cannot_be_deleted(uow, world):
    result = await delete(uow, world.s, ResourceType.actor, world.u1.id)

    assert result.is_err()
    assert result.error.code == "INVARIANT_VIOLATION"


@pytest.mark.asyncio
async def test_deleting_actor_with_open_material_usage_needs_reassignment(db_session, uow, world):
    """U1 added M1, which still has an open usage on K1"""
    material_owner = Actor(
        tenant_id=world.t1_id,
        department_id=world.d1_id,
        email="ivo@acme.example",
        name="Ivo",
    )
    material = Material(
        tenant_id=world.t1_id,
        department_id=world.d1_id,
        name="Masking tape",
        added_by=material_owner.id,
    )
    usage = MaterialUsage(
        tenant_id=world.t1_id,
        department_id=world.d1_id,
        material_id=material.id,
        task_id=world.k3_id,
        recorded_by=world.s.id,
    )
    owner_id, material_id, usage_id = material_owner.id, material.id, usage.id
    db_session.add_all([material_owner, material, usage])
    await db_session.commit()

    result = await delete(uow, world.s, ResourceType.actor, owner_id)

    assert result.is_err()
    assert result.error.code == "CONFLICT_BLOCKED_BY_CHILDREN"
    assert result.error.details["child_type"] == "material_usage"
    assert (await load(db_session, Actor, owner_id)).is_deleted is False

    reassigned = await delete(
        uow, world.s, ResourceType.actor, owner_id, {material_id: world.material_id}
    )

    assert reassigned.is_ok()
    assert (await load(db_session, Material, material_id)).is_deleted is True
    moved = await load(db_session, MaterialUsage, usage_id)
    assert moved.material_id == world.material_id
    assert moved.is_deleted is False


@pytest.mark.asyncio
async def test_deleted_actor_stops_watching_tasks(db_session, uow, world):
    """U3 watches K1 and K3; U2 watches K1"""

    def watch(department_id, task_id, actor_id):
        return TaskWatcher(
            tenant_id=world.t1_id,
            department_id=department_id,
            task_id=task_id,
            actor_id=actor_id,
        )

    watching = [
        watch(world.d1_id, world.k1_id, world.u3.id),
        watch(world.d2_id, world.k3_id, world.u3.id),
    ]
    other = watch(world.d1_id, world.k1_id, world.u2.id)
    watching_ids, other_id = [watcher.id for watcher in watching], other.id
    db_session.add_all(watching + [other])
    await db_session.commit()

    result = await delete(uow, world.s, ResourceType.actor, world.u3.id)

    assert result.is_ok()
    for watcher_id in watching_ids:
        watcher = await load(db_session, TaskWatcher, watcher_id)
        assert watcher.is_deleted is True
        assert watcher.deletion_batch_id == result.value.batch_id
    assert (await load(db_session, TaskWatcher, other_id)).is_deleted is False
    assert (await load(db_session, Task, world.k1_id)).is_deleted is False
    assert (await load(db_session, Task, world.k3_id)).is_deleted is False

    restored = await restore(uow, world.s, ResourceType.actor, world.u3.id, cascade_children=True)

    assert restored.is_ok()
    for watcher_id in watching_ids:
        assert (await load(db_session, TaskWatcher, watcher_id)).is_deleted is False
