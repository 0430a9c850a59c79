# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Access denials are deliberately indistinguishable from missing rows: both
# surface as "no rows affected" / "not found".
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.utils import ApplicationError


class SkylabException(Exception):
    """
    Base exception for the Skylab API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SKYLAB_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Row Access Exceptions
# =============================================================================

class RowNotFoundError(SkylabException):
    """Raised when a row does not exist or is not visible to the caller."""

    def __init__(self, table: str, row_id: str):
        super().__init__(
            message=f"Not found: {table}/{row_id}",
            code="ROW_NOT_FOUND",
            status_code=404,
            suggestion="Check the id, and that you are signed in with an account that can see it",
            details={"table": table, "id": row_id},
        )


class NoRowsAffectedError(SkylabException):
    """
    Raised when a write changed nothing.

    Covers both "row missing" and "write not permitted"; the two are not
    distinguished. Targeted writes (update/delete) return 404, inserts 403.
    """

    def __init__(self, table: str, row_id: str | None = None):
        details = {"table": table}
        if row_id is not None:
            details["id"] = row_id
        super().__init__(
            message=f"No rows affected in {table}",
            code="NO_ROWS_AFFECTED",
            status_code=404 if row_id is not None else 403,
            suggestion="Check the id and that your account is allowed to make this change",
            details=details,
        )


class ProfileExistsError(SkylabException):
    """Raised when a principal creates a profile they already have."""

    def __init__(self, profile_id: str):
        super().__init__(
            message=f"Profile already exists: {profile_id}",
            code="PROFILE_EXISTS",
            status_code=409,
            suggestion="Update the existing profile with PATCH instead",
            details={"id": profile_id},
        )


class AdminRequiredError(SkylabException):
    """Raised by endpoints that are not row-scoped but still admin-only."""

    def __init__(self):
        super().__init__(
            message="Admin access required",
            code="ADMIN_REQUIRED",
            status_code=403,
            suggestion="Sign in with an administrator account",
        )


class BackendUnavailableError(SkylabException):
    """Raised when Supabase cannot be reached and no cached data exists."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Data backend unavailable: {error}",
            code="BACKEND_UNAVAILABLE",
            status_code=503,
            suggestion="Try again in a moment",
            details={"error": error},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidUploadTargetError(SkylabException):
    """Raised when an upload names an unknown bucket target."""

    def __init__(self, target: str, allowed: list[str]):
        super().__init__(
            message=f"Unknown upload target: {target}",
            code="INVALID_UPLOAD_TARGET",
            status_code=400,
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"target": target, "allowed": allowed},
        )


class InvalidFileError(SkylabException):
    """Raised when an uploaded file or data URL cannot be read."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Invalid file: {error}",
            code="INVALID_FILE",
            status_code=400,
            suggestion="Upload the file again, or check the data URL is base64 encoded",
            details={"filename": filename, "error": error},
        )


class FileTooLargeError(SkylabException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


class StorageUploadError(SkylabException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def skylab_exception_handler(
    request: Request,
    exc: SkylabException
) -> JSONResponse:
    """
    Convert SkylabException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


# Library error codes that are not server faults
APPLICATION_ERROR_STATUS = {
    "STORE_UNAVAILABLE": 503,
    "CLIENT_INIT_FAILED": 503,
    "UNIQUE_VIOLATION": 409,
    "FOREIGN_KEY_VIOLATION": 409,
}


async def application_error_handler(
    request: Request,
    exc: ApplicationError
) -> JSONResponse:
    """
    Convert library-level errors (row store, Supabase client) to JSON.

    An unreachable backend is a 503, a constraint conflict a 409; anything
    else is a 500.
    """
    status_code = APPLICATION_ERROR_STATUS.get(exc.code, 500)
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=status_code, content=content)
