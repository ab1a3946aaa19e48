"""
Product Pydantic Schemas
"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from app.models.product import ProductCategory
from app.schemas.common import CamelModel


class ProductCreate(CamelModel):
    """Create a new product. Id, tag and code are generated when omitted."""
    name: str = Field(..., min_length=1, max_length=255)
    category: ProductCategory
    product_code: Optional[str] = Field(None, max_length=50)
    tag: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=20)
    current_stock: int = Field(0, ge=0)
    min_stock_level: int = Field(0, ge=0)
    shopify_skus: Dict[str, str] = Field(default_factory=dict)
    supplier: Optional[str] = None
    supplier_code: Optional[str] = None
    unit_per_box: Optional[int] = Field(None, ge=1)


class ProductUpdate(CamelModel):
    """Partial update; only provided fields change. The id never changes."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[ProductCategory] = None
    product_code: Optional[str] = Field(None, max_length=50)
    tag: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=20)
    current_stock: Optional[int] = Field(None, ge=0)
    min_stock_level: Optional[int] = Field(None, ge=0)
    shopify_skus: Optional[Dict[str, str]] = None
    supplier: Optional[str] = None
    supplier_code: Optional[str] = None
    unit_per_box: Optional[int] = Field(None, ge=1)


class ProductResponse(CamelModel):
    """Product as returned by the API"""
    id: str
    tag: Optional[str] = None
    product_code: str
    name: str
    category: str
    unit: str
    current_stock: int
    min_stock_level: int
    shopify_skus: Dict[str, str] = Field(default_factory=dict)
    supplier: Optional[str] = None
    supplier_code: Optional[str] = None
    unit_per_box: Optional[int] = None
    stock_boxes: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class SkuMappingResponse(CamelModel):
    """One variant -> Shopify SKU entry of a product"""
    id: str
    shopify_sku: str
    product_id: str
    product_code: str
    product_name: str
    variant: str
    category: str
