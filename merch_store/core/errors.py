"""Error Hierarchy — typed, categorized exceptions for every wallet failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are terminal for the call. StoreUnavailableError means the
      atomic unit was rolled back and the caller may retry. DeadlineExceededError means
      the outcome is unknown: the unit may or may not have committed
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with MerchStoreError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from merch_store.core.domain_types import MAX_COINS


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class MerchStoreError(Exception):
    """Base exception for all wallet errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidAmountError(MerchStoreError):
    """Transfer amount is not an integer in [1, MAX_COINS]."""
    def __init__(self, amount: object, context: ErrorContext | None = None):
        super().__init__(
            f"Amount must be an integer between 1 and {MAX_COINS}, got {amount!r}",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.amount = amount


class SelfTransferRejectedError(MerchStoreError):
    """Sender and recipient are the same user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot send coins to yourself",
            "SELF_TRANSFER_REJECTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class InsufficientFundsError(MerchStoreError):
    """Balance is lower than the amount to debit."""
    def __init__(self, required: int, context: ErrorContext | None = None):
        super().__init__(
            f"Insufficient funds: {required} coins required",
            "INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.required = required


class BalanceLimitExceededError(MerchStoreError):
    """Crediting the amount would push the recipient's balance past MAX_COINS."""
    def __init__(self, amount: int, context: ErrorContext | None = None):
        super().__init__(
            f"Recipient cannot hold {amount} more coins (limit {MAX_COINS})",
            "BALANCE_LIMIT_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.amount = amount


class ResourceNotFoundError(MerchStoreError):
    """Requested resource does not exist."""
    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        code: str = "RESOURCE_NOT_FOUND",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: int, context: ErrorContext | None = None):
        super().__init__("User", str(user_id), "USER_NOT_FOUND", context)


class RecipientNotFoundError(ResourceNotFoundError):
    def __init__(self, username: str, context: ErrorContext | None = None):
        super().__init__("Recipient", username, "RECIPIENT_NOT_FOUND", context)


class ItemNotFoundError(ResourceNotFoundError):
    def __init__(self, item_name: str, context: ErrorContext | None = None):
        super().__init__("Item", item_name, "ITEM_NOT_FOUND", context)


class UsernameTakenError(MerchStoreError):
    """Username already registered."""
    def __init__(self, username: str, context: ErrorContext | None = None):
        super().__init__(
            f"Username '{username}' is already taken",
            "USERNAME_TAKEN", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.username = username


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(MerchStoreError):
    """Database operation failed; the unit of work was rolled back."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class DeadlineExceededError(MerchStoreError):
    """Operation did not finish before its deadline; whether it committed is unknown."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Operation exceeded its deadline ({timeout_seconds}s); outcome unknown, "
            "check your balance before retrying",
            "DEADLINE_EXCEEDED", ErrorCategory.TIMEOUT,
            ErrorSeverity.CRITICAL, context, 504,
        )
        self.timeout_seconds = timeout_seconds
