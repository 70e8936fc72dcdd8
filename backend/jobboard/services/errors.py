"""
Domain errors raised by the application workflow.

Each error carries an ErrorCode; the API layer maps codes to HTTP status
codes in one place (see jobboard.main).
"""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INVALID_STATE = "INVALID_STATE"


# Duplicate applications and inactive jobs are reported as 400, as the
# client has always received them.
HTTP_STATUS_BY_CODE = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.CONFLICT: 400,
    ErrorCode.INVALID_STATE: 400,
}


class ApplicationError(Exception):
    """Base error for the application workflow."""
    code: ErrorCode = ErrorCode.VALIDATION

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CODE[self.code]


class ValidationError(ApplicationError):
    """Malformed input; the caller can correct and retry."""
    code = ErrorCode.VALIDATION


class NotFoundError(ApplicationError):
    """Referenced job or application does not exist."""
    code = ErrorCode.NOT_FOUND


class ForbiddenError(ApplicationError):
    """Authenticated but not allowed (wrong role or not the owner)."""
    code = ErrorCode.FORBIDDEN


class ConflictError(ApplicationError):
    """Duplicate application for the same job and user."""
    code = ErrorCode.CONFLICT


class InvalidStateError(ApplicationError):
    """Operation not permitted given the job's current status."""
    code = ErrorCode.INVALID_STATE
