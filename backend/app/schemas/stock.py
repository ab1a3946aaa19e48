"""
Stock adjustment and ledger schemas
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.product import ProductResponse


class StockAdjustRequest(CamelModel):
    """Manual stock adjustment"""
    product_id: str
    quantity: int = Field(..., gt=0)
    type: Literal["add", "remove"]
    notes: Optional[str] = Field(None, max_length=1000)


class TransactionResponse(CamelModel):
    """Ledger entry. Ids are rendered as decimal strings."""
    id: str
    product_id: str
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    type: str
    quantity: int
    unit: Optional[str] = None
    balance_after: int
    notes: Optional[str] = ""
    shopify_order_id: Optional[str] = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return str(v)


class StockAdjustResponse(CamelModel):
    product: ProductResponse
    transaction: TransactionResponse
