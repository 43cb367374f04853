"""Error taxonomy for the Hashtrack client.

Every remote-facing call maps its outcome onto exactly one ``ApiError``
subclass; local storage failures surface as ``StorageError``.
"""

from __future__ import annotations


class HashtrackError(Exception):
    """Base class for all errors raised by the client."""

    code = "RUNTIME_ERROR"


class ApiError(HashtrackError):
    """A request to the Hashtrack service did not produce a usable result."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ApiError):
    """Connection failure or timeout before a response was received."""

    code = "NETWORK_ERROR"


class UnauthenticatedError(ApiError):
    """No local token; the request was never sent."""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Not logged in") -> None:
        super().__init__(message)


class RejectedError(ApiError):
    """The service refused the request (401/403 or another client error)."""

    code = "REJECTED"

    @property
    def is_auth_failure(self) -> bool:
        return self.status_code in (401, 403)


class NotFoundError(ApiError):
    code = "NOT_FOUND"


class ServerError(ApiError):
    code = "SERVER_ERROR"


class MalformedError(ApiError):
    """Response body could not be decoded into the expected shape."""

    code = "MALFORMED"


class StorageError(HashtrackError):
    """The token file could not be written or removed."""

    code = "STORAGE_ERROR"


class ConfigError(HashtrackError):
    code = "CONFIG_ERROR"
