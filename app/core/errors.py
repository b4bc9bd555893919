from fastapi import HTTPException, status
from typing import Optional


class ApiError(HTTPException):
    """HTTP error carrying a stable machine-readable code."""

    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None, headers: Optional[dict] = None):
        self.message = message or type(self).message
        super().__init__(
            status_code=type(self).status_code,
            detail=self.message,
            headers=headers,
        )


# Security exceptions
class UnauthenticatedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "Access token required"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Insufficient permissions"


class InvalidCredentialsError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class UserExistsError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "USER_EXISTS"
    message = "User with this email already exists"


# Booking exceptions
class SlotNotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "SLOT_NOT_FOUND"
    message = "Slot not found"


class SlotTakenError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "SLOT_TAKEN"
    message = "Slot already booked"


class UserNotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"
    message = "User not found"


class RateLimitExceededError(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMIT_EXCEEDED"
    message = "Too many requests, please try again later"


# Codes for framework-raised HTTP errors that are not ApiError instances
STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMIT_EXCEEDED",
}


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}
