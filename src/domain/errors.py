"""
Domain Error Taxonomy

Engines raise these exceptions; use cases catch ``DomainError`` and return
``Return.err(exc.error)`` so the API layer can map the code to a status.
"""

from typing import Iterable, Optional
from uuid import UUID

from libs.result import Error


class DomainError(Exception):
    """Base class carrying a result Error"""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None, **details):
        self.error = Error(self.code, message, reason=reason, details=details)
        super().__init__(message)


class ConfigurationError(DomainError):
    """Authorization matrix or entity graph is incomplete or cyclic (fatal at boot)"""

    code = "CONFIGURATION_ERROR"


class AuthorizationDenied(DomainError):
    """Role has no scope for the requested operation"""

    code = "AUTHORIZATION_DENIED"


class NotFoundInScope(DomainError):
    """Target is absent or outside the actor's scope; both read the same"""

    code = "NOT_FOUND"

    def __init__(self, resource_type: str):
        super().__init__(f"{resource_type} not found")


class ConflictBlockedByChildren(DomainError):
    """Cascade delete blocked by active dependent records"""

    code = "CONFLICT_BLOCKED_BY_CHILDREN"

    def __init__(self, resource_type: str, child_type: str, child_ids: Iterable[UUID]):
        ids = [str(child_id) for child_id in child_ids]
        self.child_type = child_type
        self.child_ids = ids
        super().__init__(
            f"Cannot delete {resource_type}: {len(ids)} active {child_type} record(s) depend on it",
            reason="Reassign or delete the dependent records first",
            child_type=child_type,
            child_ids=ids,
        )


class InvalidReassignment(DomainError):
    """Replacement target supplied for a reassignment is unusable"""

    code = "INVALID_REASSIGNMENT"


class InvariantViolation(DomainError):
    """Operation would break a structural invariant (never retried)"""

    code = "INVARIANT_VIOLATION"


class LifecycleConflict(DomainError):
    """Record is not in the lifecycle state the operation requires"""

    code = "LIFECYCLE_CONFLICT"


class TransientStorageConflict(DomainError):
    """Concurrent write conflict; the whole logical operation may be retried"""

    code = "TRANSIENT_STORAGE_CONFLICT"
