"""
Common API Response Schemas

Shared base model and the standardized error/success responses.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for back-office schemas.

    Python attributes are snake_case; the JSON wire format is camelCase
    (productCode, currentStock, ...). Both spellings are accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Error Response Models
# ============================================================================

class ErrorResponse(BaseModel):
    """
    Standardized error response for all API errors.

    Error Codes:
        - VALIDATION_ERROR: Request validation failed (400/422)
        - DUPLICATE_ERROR: Duplicate resource (400)
        - INVALID_CREDENTIALS: Invalid name/password (401)
        - INVALID_SIGNATURE: Webhook HMAC mismatch (401)
        - PERMISSION_DENIED: Action not allowed (403)
        - NOT_FOUND: Resource not found (404)
        - CONCURRENCY_ERROR: Concurrent modification detected (409)
        - DATABASE_ERROR: Database operation failed (500)
        - INTERNAL_ERROR: Unexpected internal error (500)

    Example:
        {
            "error": "NOT_FOUND",
            "message": "Product with ID oils_9 not found",
            "details": {
                "resource": "Product",
                "resource_id": "oils_9"
            },
            "timestamp": "2025-12-23T10:30:00Z"
        }
    """
    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional error context for debugging"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the error occurred (UTC)"
    )


class SuccessResponse(BaseModel):
    """Plain acknowledgement for deletes and password resets."""
    success: bool = True
