"""Error taxonomy.

Each kind is an ``HTTPException`` so services can raise it directly and
FastAPI renders ``{"detail": ...}`` with the matching status code.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base for all application errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Access denied. No token provided."

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidToken(Unauthenticated):
    default_detail = "Invalid or expired token."


class InvalidCredential(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class DuplicateCredential(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Username or email already taken"


class Duplicate(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InvalidState(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current state"


class UploadError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Image upload failed"


class InternalError(AppError):
    pass


def format_validation_errors(errors) -> str:
    """Flatten pydantic error dicts into ``"field: message; ..."``."""
    parts = []
    for err in errors:
        field = ".".join(str(loc) for loc in err["loc"] if loc != "body") or "body"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)
