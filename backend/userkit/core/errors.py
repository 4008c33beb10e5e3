"""Error Hierarchy: typed, categorized exceptions for every userkit failure mode.

Invariants:
    - Every error has a code (str), kind (ErrorKind), category (ErrorCategory), severity (ErrorSeverity)
    - ErrorKind is closed: NOT_FOUND, STORAGE_ERROR, MALFORMED_TOKEN, INVALID_SIGNATURE
    - to_response() produces a structured error envelope
    - No secrets or token contents in messages

Design Decisions:
    - Single hierarchy with UserKitError base: callers catch one type and switch on kind
    - ErrorContext as dataclass: observability without coupling to the logging setup
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from userkit.core.domain_types import UserId


class ErrorKind(str, Enum):
    """The four failure kinds a caller can discriminate on."""
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"
    MALFORMED_TOKEN = "malformed_token"
    INVALID_SIGNATURE = "invalid_signature"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: UserId | None = None
    domain: str | None = None
    subdomain: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class UserKitError(Exception):
    """Base exception for all userkit errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to a structured error envelope."""
        return {
            "error": {
                "code": self.code,
                "kind": self.kind.value,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "domain": self.context.domain,
                    "subdomain": self.context.subdomain,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Record Store Errors ────────────────────────────────────────

class UserNotFoundError(UserKitError):
    """No account record matches the requested identifier."""
    def __init__(self, user_id: UserId, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            f"User '{user_id}' not found",
            "USER_NOT_FOUND", ErrorKind.NOT_FOUND,
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING, ctx,
        )
        self.user_id = user_id


class StorageError(UserKitError):
    """Underlying store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorKind.STORAGE_ERROR,
            ErrorCategory.DATABASE, ErrorSeverity.CRITICAL, ctx,
        )
        self.operation = operation


# ─── Token Errors ───────────────────────────────────────────────

class MalformedTokenError(UserKitError):
    """Token framing, base64, JSON or payload shape is invalid."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed token: {reason}",
            "MALFORMED_TOKEN", ErrorKind.MALFORMED_TOKEN,
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context,
        )
        self.reason = reason


class InvalidSignatureError(UserKitError):
    """Token signature does not match the one recomputed with the given key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Token signature is invalid",
            "INVALID_SIGNATURE", ErrorKind.INVALID_SIGNATURE,
            ErrorCategory.AUTHENTICATION, ErrorSeverity.ERROR, context,
        )
