"""
Typed errors raised by the order store.

Every error carries a stable ``error_code``, a severity and a category so that
callers can translate it into whatever response their transport needs without
string matching on messages.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
import uuid


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    CONFLICT = "CONFLICT"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    INTERNAL = "INTERNAL"


class BaseServiceError(Exception):
    """Base exception class for order store errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.user_message = user_message or "An error occurred while processing your request."
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and response."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class InvalidArgumentError(BaseServiceError, ValueError):
    """Raised when a required field is missing or empty."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="INVALID_ARGUMENT",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            user_message="Invalid input provided. Please check your request and try again.",
        )
        self.field = field


class OrderNotFoundError(BaseServiceError):
    """Raised when an order does not exist."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order {order_id} does not exist",
            error_code="ORDER_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            user_message="The requested order was not found.",
        )
        self.order_id = order_id


class DALError(BaseServiceError):
    """Base exception for Data Access Layer errors."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "DAL_ERROR",
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        user_message: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=severity,
            category=category,
            user_message=user_message or "A database error occurred. Please try again later.",
        )
        self.operation = operation
        self.table_name = table_name


class TableMissingError(DALError):
    """Raised when the backing DynamoDB table does not exist."""

    def __init__(self, table_name: str, operation: str):
        super().__init__(
            message=f"Order table {table_name} does not exist",
            operation=operation,
            table_name=table_name,
            error_code="TABLE_NOT_FOUND",
            severity=ErrorSeverity.CRITICAL,
        )


class ConditionalCheckFailedError(DALError):
    """Raised when a conditional write is rejected by DynamoDB."""

    def __init__(self, table_name: str, operation: str):
        super().__init__(
            message=f"Conditional check failed during {operation}",
            operation=operation,
            table_name=table_name,
            error_code="CONDITIONAL_CHECK_FAILED",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.CONFLICT,
        )


class CouldNotCreateOrderError(DALError):
    """Raised when every create attempt collided with an existing order id."""

    def __init__(self, table_name: str, attempts: int):
        super().__init__(
            message=f"Too many order id collisions ({attempts} attempts)",
            operation="CreateOrder",
            table_name=table_name,
            error_code="COULD_NOT_CREATE_ORDER",
        )
        self.attempts = attempts


class UpdateConflictError(BaseServiceError):
    """Raised when an update targets a missing order or a stale version."""

    def __init__(self, order_id: str, expected_version: int):
        super().__init__(
            message=f"Order {order_id} missing or version {expected_version} is stale",
            error_code="UPDATE_CONFLICT",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.CONFLICT,
            user_message="The order was changed or removed. Fetch it again and retry.",
        )
        self.order_id = order_id
        self.expected_version = expected_version


class DeleteConflictError(BaseServiceError):
    """Raised when a delete targets an order that is already gone."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order {order_id} missing or deleted by a competing request",
            error_code="DELETE_CONFLICT",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.CONFLICT,
            user_message="The order no longer exists.",
        )
        self.order_id = order_id


class CorruptContinuationKeyError(DALError):
    """Raised when a scan returns a continuation key without a usable orderId."""

    def __init__(self, table_name: str, last_evaluated_key: Dict[str, Any]):
        super().__init__(
            message="Missing or invalid orderId in pagination key",
            operation="Scan",
            table_name=table_name,
            error_code="CORRUPT_CONTINUATION_KEY",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INTERNAL,
        )
        self.last_evaluated_key = last_evaluated_key


class CorruptDeleteResponseError(DALError):
    """Raised when a successful delete returns no prior item state."""

    def __init__(self, table_name: str, order_id: str):
        super().__init__(
            message=f"Deleted item {order_id} was unexpectedly empty",
            operation="DeleteItem",
            table_name=table_name,
            error_code="CORRUPT_DELETE_RESPONSE",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INTERNAL,
        )
        self.order_id = order_id
