"""
Shopify webhook schemas

The inbound payload keeps Shopify's snake_case field names and tolerates the
many fields we ignore. Responses use the back-office camelCase format.
"""
from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import CamelModel


# ============================================================================
# Inbound payload
# ============================================================================

class ShopifyLineItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    sku: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)


class ShopifyOrderPayload(BaseModel):
    """orders/fulfilled notification (only the fields we use are declared)"""
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    order_number: Optional[Union[int, str]] = None
    fulfillment_status: Optional[str] = None
    line_items: Optional[List[ShopifyLineItem]] = None


# ============================================================================
# Processing result
# ============================================================================

class DeductionResponse(CamelModel):
    kind: str  # oil, component, direct
    product_id: str
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    quantity: int
    balance_after: int
    shortfall: int = 0
    transaction_id: str

    @field_validator("transaction_id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return str(v)


class SkippedComponentResponse(CamelModel):
    component_code: Optional[str] = None
    component_name: Optional[str] = None
    reason: str


class LineItemResultResponse(CamelModel):
    sku: Optional[str] = None
    quantity: int
    status: str  # resolved, partially_applied, unresolved
    match_type: Optional[str] = None  # oil_variant, direct
    variant_key: Optional[str] = None
    oil_id: Optional[str] = None
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    deductions: List[DeductionResponse] = Field(default_factory=list)
    skipped: List[SkippedComponentResponse] = Field(default_factory=list)


class FulfillmentSummaryResponse(CamelModel):
    line_items: int = 0
    resolved: int = 0
    partially_applied: int = 0
    unresolved: int = 0
    transactions_created: int = 0


class WebhookResponse(CamelModel):
    success: bool = True
    message: str = "Webhook processed successfully"
    order_id: str
    order_number: str
    duplicate_delivery: bool = False
    deductions_skipped: bool = False
    summary: FulfillmentSummaryResponse
    results: List[LineItemResultResponse] = Field(default_factory=list)


# ============================================================================
# Order log
# ============================================================================

class ShopifyOrderResponse(CamelModel):
    """Order log entry; `id` is the Shopify order id"""
    id: str
    order_number: Optional[str] = None
    fulfillment_status: Optional[str] = None
    line_items: Optional[List[Any]] = None
    received_at: datetime

    @classmethod
    def from_log(cls, entry) -> "ShopifyOrderResponse":
        return cls(
            id=entry.shopify_order_id,
            order_number=entry.order_number,
            fulfillment_status=entry.fulfillment_status,
            line_items=entry.line_items,
            received_at=entry.received_at,
        )
