"""Error Hierarchy — typed, categorized exceptions for every ExamHub failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) carry a user-facing message; server errors (500-level)
      keep upstream detail in `detail`, surfaced only outside production
    - Global handlers (api/error_handlers.py) turn every ExamHubError into the
      standard Failure envelope

Design Decisions:
    - Single hierarchy with ExamHubError base: one handler, one envelope shape
    - Authorization split into missing (401) and insufficient (403)
"""

from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    REMOTE_STORE = "remote_store"
    INTERNAL = "internal"


class ExamHubError(Exception):
    """Base exception for all ExamHub errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        detail: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.detail = detail


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationError(ExamHubError):
    """Missing or malformed request field."""
    def __init__(self, message: str, field: str | None = None, detail: Any = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400, detail,
        )
        self.field = field


class MissingFieldError(ValidationError):
    """Required field absent or empty."""
    def __init__(self, field: str):
        super().__init__(
            f"Missing required field: {field} is required", field=field,
        )


class AuthorizationMissingError(ExamHubError):
    """No roles or no identity presented where one is required."""
    def __init__(self, message: str = "Access denied: No roles provided"):
        super().__init__(
            message, "AUTHORIZATION_MISSING", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, 401,
        )


class PermissionDeniedError(ExamHubError):
    """Role mismatch or non-owner mutation."""
    def __init__(self, message: str = "Access denied: Insufficient permissions"):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, 403,
        )


class ResourceNotFoundError(ExamHubError):
    """Requested row is absent or soft-deleted."""
    def __init__(self, message: str):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )


class ConflictError(ExamHubError):
    """Uniqueness rule violated (translation key, topic name)."""
    def __init__(self, message: str, detail: Any = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409, detail,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class OperationFailedError(ExamHubError):
    """A controller operation failed on the remote store."""
    def __init__(self, message: str, detail: Any = None):
        super().__init__(
            message, "OPERATION_FAILED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500, detail,
        )


class RemoteStoreError(ExamHubError):
    """Transport failure or non-2xx response from the remote table API."""
    def __init__(
        self,
        message: str,
        table: str,
        operation: str,
        upstream_status: int | None = None,
        upstream_code: str | None = None,
        http_status: int = 500,
        code: str = "REMOTE_STORE_ERROR",
        category: ErrorCategory = ErrorCategory.REMOTE_STORE,
    ):
        super().__init__(
            f"Remote {operation} on '{table}' failed: {message}",
            code, category, ErrorSeverity.CRITICAL, http_status, message,
        )
        self.table = table
        self.operation = operation
        self.upstream_status = upstream_status
        self.upstream_code = upstream_code


class RemoteConflictError(RemoteStoreError):
    """Remote store rejected a write on a unique constraint."""
    def __init__(
        self,
        message: str,
        table: str,
        operation: str,
        upstream_status: int | None = None,
        upstream_code: str | None = None,
    ):
        super().__init__(
            message, table, operation, upstream_status, upstream_code,
            http_status=409, code="REMOTE_CONFLICT",
            category=ErrorCategory.CONFLICT,
        )
