"""Custom error definitions for API exceptions.

Every error carries a human-readable `detail` that ends up as the `message`
of the `{success: false, message}` envelope. `data` is attached to the
envelope when set.
"""
from typing import Any, Optional
from fastapi import HTTPException
from starlette import status


class APIError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"

    def __init__(self, detail: Optional[str] = None, data: Optional[Any] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)
        self.data = data


class Unauthenticated(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthenticated"

    def __init__(self, detail: Optional[str] = None, data: Optional[Any] = None):
        super().__init__(detail, data, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class ValidationFailed(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"


class InternalConfigurationError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server configuration is invalid. Contact the administrator."


class UserNotFoundError(NotFound):
    default_detail = "User not found"


class UserAlreadyExistsError(Conflict):
    default_detail = "User already exists"


class ActiveSessionError(Conflict):
    default_detail = (
        "You are already logged in on another device. Log out there first "
        "or wait until the session expires."
    )


class AccountDeactivatedError(Forbidden):
    default_detail = "Your account has been deactivated"
