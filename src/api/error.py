from fastapi import status

from libs.result import Error

# Domain error codes surfaced to clients; anything else is a server error
CLIENT_ERROR_STATUS = {
    "AUTHORIZATION_DENIED": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT_BLOCKED_BY_CHILDREN": status.HTTP_409_CONFLICT,
    "LIFECYCLE_CONFLICT": status.HTTP_409_CONFLICT,
    "INVARIANT_VIOLATION": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_REASSIGNMENT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "TRANSIENT_STORAGE_CONFLICT": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the HTTP-facing exception for a use case error"""
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
