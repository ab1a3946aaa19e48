"""
Inventory ledger models
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from datetime import datetime

from app.db.base import Base


class StockTransaction(Base):
    """
    Immutable audit record of one stock mutation.

    Product fields are denormalized so the ledger still reads correctly
    after a product is renamed or deleted. Rows are never updated; the
    ledger is listed newest first (highest id first).
    """
    __tablename__ = "stock_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Product snapshot
    product_id = Column(String(50), nullable=False, index=True)
    product_code = Column(String(50), nullable=True)
    product_name = Column(String(255), nullable=True)
    category = Column(String(30), nullable=True)

    # Movement
    type = Column(String(10), nullable=False)  # add, remove
    quantity = Column(Integer, nullable=False)
    unit = Column(String(20), nullable=True)
    balance_after = Column(Integer, nullable=False)

    notes = Column(Text, default="", nullable=True)
    shopify_order_id = Column(String(50), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<StockTransaction {self.type}: {self.quantity} {self.product_id}>"


class ShopifyOrder(Base):
    """Raw log of every order notification received by the webhook."""
    __tablename__ = "shopify_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shopify_order_id = Column(String(50), nullable=False, index=True)
    order_number = Column(String(50), nullable=True)
    fulfillment_status = Column(String(50), nullable=True)
    line_items = Column(JSON, nullable=True)
    received_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ShopifyOrder #{self.order_number} ({self.shopify_order_id})>"
