"""
Domain Enums

All enumeration types used across domain entities, the authorization
matrix and the lifecycle engines.
"""

from enum import Enum


class ResourceType(str, Enum):
    """Record types known to the entity graph"""

    tenant = "tenant"
    department = "department"
    actor = "actor"
    task = "task"
    task_activity = "task_activity"
    task_comment = "task_comment"
    task_watcher = "task_watcher"
    attachment = "attachment"
    material = "material"
    material_usage = "material_usage"
    vendor = "vendor"
    notification = "notification"


class ActorRole(str, Enum):
    """Actor role within a tenant (descending privileges)"""

    super_admin = "super_admin"
    admin = "admin"
    manager = "manager"
    member = "member"


# Roles that may head a department
HEAD_OF_DEPARTMENT_ROLES = (ActorRole.super_admin, ActorRole.admin)


class Operation(str, Enum):
    """Operations gated by the authorization matrix"""

    create = "create"
    read = "read"
    update = "update"
    delete = "delete"


class Scope(str, Enum):
    """Breadth of an actor's reach over a resource type"""

    none = "none"
    own = "own"
    department = "department"
    tenant = "tenant"
    all = "all"


class CascadePolicy(str, Enum):
    """What happens to dependent records when a parent is deleted"""

    soft_delete = "soft_delete"
    block_if_exists = "block_if_exists"
    require_reassignment = "require_reassignment"


class ReadMode(str, Enum):
    """Lifecycle visibility of a read"""

    active = "active"
    include_deleted = "include_deleted"
    only_deleted = "only_deleted"


class LifecycleAction(str, Enum):
    """Action reported for each record touched by a lifecycle operation"""

    deleted = "deleted"
    restored = "restored"
    reassigned = "reassigned"
    purged = "purged"


class TaskType(str, Enum):
    """Task variants"""

    project = "project"
    routine = "routine"
    assigned = "assigned"


class TaskStatus(str, Enum):
    """Task status"""

    to_do = "to_do"
    in_progress = "in_progress"
    completed = "completed"
    pending = "pending"
