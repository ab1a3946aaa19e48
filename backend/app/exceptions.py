"""
Typed errors for the inventory backend.

Every error carries a machine-readable `error_code` and the HTTP status it
is rendered with by the handler in app.main:

    {"error": "NOT_FOUND", "message": "Product with ID oils_9 not found",
     "details": {"resource": "Product", "resource_id": "oils_9"}}

Keyword context passed to any error (field=, value=, filename=, ...) ends up
in `details`, stringified, skipping None values.

Unresolved SKUs and BOM components met while fulfilling an order are not
errors; they are reported in the webhook result instead.
"""
from typing import Any, Dict, Optional


class InventoryException(Exception):
    """Base class; unknown subclasses render as a 500."""

    error_code: str = "INVENTORY_ERROR"
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
        **context: Any,
    ):
        self.message = message or self.default_message
        self.details = dict(details or {})
        for key, value in context.items():
            if value is not None:
                self.details[key] = value if isinstance(value, (int, float)) else str(value)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


# 400: bad input or a state that forbids the operation

class ValidationError(InventoryException):
    """Bad request data: upload without file, zero quantity, malformed webhook body."""
    error_code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation failed"


class DuplicateError(InventoryException):
    """A user name or BOM component code that already exists."""
    error_code = "DUPLICATE_ERROR"
    status_code = 400

    def __init__(
        self,
        resource: str = "Resource",
        *,
        field: Optional[str] = None,
        value: Any = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource} already exists"
            if field and value is not None:
                message = f"{resource} with {field}='{value}' already exists"
        super().__init__(message, details=details, resource=resource, field=field, value=value)


class InvalidStateError(InventoryException):
    """E.g. importing a snapshot into a store that already holds data."""
    error_code = "INVALID_STATE"
    status_code = 400
    default_message = "Operation not allowed in the current state"


# 401

class AuthenticationError(InventoryException):
    error_code = "AUTHENTICATION_ERROR"
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentialsError(AuthenticationError):
    """Unknown user name or wrong password; the two are not told apart."""
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class InvalidSignatureError(AuthenticationError):
    """Shopify webhook HMAC missing or not matching the shared secret."""
    error_code = "INVALID_SIGNATURE"
    default_message = "Webhook signature verification failed"


# 403

class PermissionDeniedError(InventoryException):
    """Protected records, such as admin accounts, that may not be removed."""
    error_code = "PERMISSION_DENIED"
    status_code = 403
    default_message = "Permission denied"


# 404

class NotFoundError(InventoryException):
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Any = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message,
            details=details,
            resource=resource,
            resource_id=None if resource_id is None else str(resource_id),
        )


# 409

class ConflictError(InventoryException):
    error_code = "CONFLICT"
    status_code = 409
    default_message = "Resource conflict"


class ConcurrencyError(ConflictError):
    """Optimistic-lock retries on a stock write were exhausted."""
    error_code = "CONCURRENCY_ERROR"
    default_message = "Stock was modified by another request"


# 500

class FileStorageError(InventoryException):
    """An attachment could not be written to UPLOAD_DIR."""
    error_code = "FILE_STORAGE_ERROR"
    status_code = 500
    default_message = "File storage operation failed"
