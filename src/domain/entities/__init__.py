"""
Domain Entities

All record types managed by the authorization and lifecycle engines.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    HEAD_OF_DEPARTMENT_ROLES,
    ActorRole,
    CascadePolicy,
    LifecycleAction,
    Operation,
    ReadMode,
    ResourceType,
    Scope,
    TaskStatus,
    TaskType,
)

# Export all entities
from .lifecycle import LifecycleFields
from .tenant import Tenant
from .department import Department
from .actor import Actor
from .task import Task
from .task_activity import TaskActivity
from .task_comment import MAX_COMMENT_DEPTH, TaskComment
from .task_watcher import TaskWatcher
from .attachment import Attachment
from .material import Material
from .material_usage import MaterialUsage
from .vendor import Vendor
from .notification import Notification
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ResourceType",
    "ActorRole",
    "HEAD_OF_DEPARTMENT_ROLES",
    "Operation",
    "Scope",
    "CascadePolicy",
    "ReadMode",
    "LifecycleAction",
    "TaskType",
    "TaskStatus",
    # Entities
    "LifecycleFields",
    "Tenant",
    "Department",
    "Actor",
    "Task",
    "TaskActivity",
    "TaskComment",
    "MAX_COMMENT_DEPTH",
    "TaskWatcher",
    "Attachment",
    "Material",
    "MaterialUsage",
    "Vendor",
    "Notification",
    "AuditEvent",
]
