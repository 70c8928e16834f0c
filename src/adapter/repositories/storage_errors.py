"""
Translation of driver-level write conflicts into TransientStorageConflict.

Serialization failures, deadlocks and SQLite's busy lock all mean the
whole logical operation may be retried from the top.
"""

from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm.exc import StaleDataError

from src.domain.errors import TransientStorageConflict

RETRYABLE_SQLSTATES = ("40001", "40P01")
RETRYABLE_MESSAGES = ("database is locked", "deadlock detected", "could not serialize")


def is_transient(exc: DBAPIError) -> bool:
    original = getattr(exc, "orig", None)
    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True
    message = str(original if original is not None else exc).lower()
    return any(fragment in message for fragment in RETRYABLE_MESSAGES)


@contextmanager
def storage_errors():
    try:
        yield
    except StaleDataError as exc:
        raise TransientStorageConflict(
            "Record changed concurrently", reason=str(exc)
        ) from exc
    except DBAPIError as exc:
        if is_transient(exc):
            raise TransientStorageConflict(
                "Concurrent write conflict", reason=str(exc.orig)
            ) from exc
        raise
