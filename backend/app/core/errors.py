"""Application error types.

Operational errors (bad input, business-rule violations, missing records, bad
credentials) are raised as AppError subclasses and returned to the client as-is.
Anything else reaching the exception handler is treated as a fatal, unexpected
failure and answered with a generic 500.
"""
from dataclasses import dataclass
from typing import Any, Optional


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    FILE_UPLOAD_ERROR = "FILE_UPLOAD_ERROR"


class AppError(Exception):
    status_code = 500
    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Any = None,
        is_operational: bool = True,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details
        self.is_operational = is_operational


class ValidationError(AppError):
    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(AppError):
    status_code = 404
    error_code = ErrorCode.NOT_FOUND


class UnauthorizedError(AppError):
    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED


class FileUploadError(AppError):
    status_code = 400
    error_code = ErrorCode.FILE_UPLOAD_ERROR


@dataclass(frozen=True)
class RuleViolation:
    """Outcome of a failed business-rule check."""
    message: str
    status_code: int = 400

    def to_error(self) -> ValidationError:
        return ValidationError(self.message, status_code=self.status_code)
