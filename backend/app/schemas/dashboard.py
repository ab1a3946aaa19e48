"""
Dashboard schemas
"""
from typing import List

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.stock import TransactionResponse


class CategoryCounts(CamelModel):
    """Product counts keyed by category value (OILS, ...)"""
    oils: int = Field(0, alias="OILS")
    machines_spares: int = Field(0, alias="MACHINES_SPARES")
    raw_materials: int = Field(0, alias="RAW_MATERIALS")


class StockValueTotals(CamelModel):
    """
    Per-category stock totals. Oils are reported in litres rounded to one
    decimal place; the other categories are plain unit counts.
    """
    oils: float = 0.0
    machines_spares: int = 0
    raw_materials: int = 0


class DashboardStats(CamelModel):
    """Summary shown on the back-office home screen"""
    total_products: int
    low_stock_products: int
    by_category: CategoryCounts
    total_stock_value: StockValueTotals
    recent_transactions: List[TransactionResponse] = Field(default_factory=list)
