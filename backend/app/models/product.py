"""
Product model - oils, machine spares and raw materials tracked in one table
"""
import enum

from sqlalchemy import Column, Integer, String, DateTime, JSON
from datetime import datetime

from app.db.base import Base


class ProductCategory(str, enum.Enum):
    """
    Product categories. The category also prefixes generated ids and codes:
    - OILS: finished goods, stock kept in mL, sold as bottle/cartridge variants
    - MACHINES_SPARES: diffuser machines and spare parts, sold directly
    - RAW_MATERIALS: BOM components consumed when oils are sold
    """
    OILS = "OILS"
    MACHINES_SPARES = "MACHINES_SPARES"
    RAW_MATERIALS = "RAW_MATERIALS"


class Product(Base):
    """
    Unified stock item.

    `shopify_skus` maps a variant key (e.g. SA_CA) to the external SKU sold
    on Shopify, so one oil product stands for several sellable variants.
    Rows are versioned: concurrent writers detect each other on flush.
    """
    __tablename__ = "products"

    id = Column(String(50), primary_key=True)  # oils_7, raw_materials_12
    tag = Column(String(50), nullable=True)
    product_code = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(30), nullable=False, index=True)
    unit = Column(String(20), default="units", nullable=False)

    # Stock
    current_stock = Column(Integer, default=0, nullable=False)
    min_stock_level = Column(Integer, default=0, nullable=False)
    unit_per_box = Column(Integer, default=1, nullable=True)
    stock_boxes = Column(Integer, default=0, nullable=True)

    # External mappings
    shopify_skus = Column(JSON, default=dict, nullable=False)

    # Purchasing
    supplier = Column(String(255), default="", nullable=True)
    supplier_code = Column(String(100), default="", nullable=True)

    # Optimistic locking
    version = Column(Integer, nullable=False, default=1)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Product {self.product_code}: {self.name}>"
