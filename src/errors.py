"""
Error types raised by the Airbrake client and project reconciler.

All errors derive from AirbrakeError so callers can catch the whole family,
while still being able to tell "doesn't exist" (NotFoundError) apart from
"couldn't check" (TransportError, APIError, MalformedResponse).
"""

from typing import Optional, Union


class AirbrakeError(Exception):
    """Base class for all Airbrake errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportError(AirbrakeError):
    """Raised when the remote service could not be reached (DNS, connect, TLS, timeout)."""


class InvalidCredentials(AirbrakeError):
    """Raised when the API key or email/password pair is rejected."""


class MalformedResponse(AirbrakeError):
    """Raised when a response body does not match the expected shape."""


class APIError(AirbrakeError):
    """Raised when the remote service answers a CRUD call with a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None, operation: str = ""):
        self.status = status
        self.operation = operation
        super().__init__(message)


class NotFoundError(AirbrakeError):
    """Raised when a project lookup by name or id finds no match."""

    def __init__(self, key: Union[str, int]):
        self.key = key
        super().__init__(f"can't find project: {key}")


class PartialCreateError(APIError):
    """
    Raised when a project was created remotely but its language could not be set.

    The remote service keeps the created project. ``result`` holds the
    CreateResult describing it so the caller can reconcile or clean up.
    """

    def __init__(self, message: str, result, status: Optional[int] = None):
        self.result = result
        super().__init__(message, status=status, operation="create")
