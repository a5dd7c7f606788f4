"""
Domain error kinds for Alias Platform.

Every failure a caller can observe is one of the classes below. The store
classifies driver exceptions into these kinds; the managers let them
propagate; the HTTP boundary maps `status_code` to a response.

Hierarchy:
    AliasPlatformError
    ├── NotFoundError            (URLNotFoundError, UserNotFoundError, SessionNotFoundError)
    ├── ConflictError            (AliasConflictError, UsernameConflictError)
    ├── AuthFailedError
    ├── InvalidInputError        (also a ValueError)
    ├── GenerationError
    ├── HashingError
    └── StoreError
"""

from http import HTTPStatus
from typing import Optional

__all__ = [
    "AliasPlatformError",
    "NotFoundError",
    "URLNotFoundError",
    "UserNotFoundError",
    "SessionNotFoundError",
    "ConflictError",
    "AliasConflictError",
    "UsernameConflictError",
    "AuthFailedError",
    "InvalidInputError",
    "GenerationError",
    "HashingError",
    "StoreError",
]


class AliasPlatformError(Exception):
    """Base class for all domain errors.

    Attributes:
        status_code (HTTPStatus): Status the HTTP boundary answers with.
        message (str): Client-safe description. Internal details stay in
            the exception chain (``__cause__``) and in the logs.
    """

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "internal error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(detail or self.message)


class NotFoundError(AliasPlatformError):
    status_code = HTTPStatus.NOT_FOUND
    message = "not found"


class URLNotFoundError(NotFoundError):
    message = "url not found"


class UserNotFoundError(NotFoundError):
    message = "user not found"


class SessionNotFoundError(NotFoundError):
    message = "session not found"


class ConflictError(AliasPlatformError):
    status_code = HTTPStatus.CONFLICT
    message = "already exists"


class AliasConflictError(ConflictError):
    message = "alias already exists"


class UsernameConflictError(ConflictError):
    message = "username already exists"


class AuthFailedError(AliasPlatformError):
    # Same message for unknown user and wrong password.
    status_code = HTTPStatus.UNAUTHORIZED
    message = "authentication failed"


class InvalidInputError(AliasPlatformError, ValueError):
    status_code = HTTPStatus.BAD_REQUEST
    message = "invalid request"


class GenerationError(AliasPlatformError):
    message = "failed to generate random string"


class HashingError(AliasPlatformError):
    message = "failed to hash password"


class StoreError(AliasPlatformError):
    message = "storage error"
