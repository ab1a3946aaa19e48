"""Database models"""
from app.models.product import Product, ProductCategory
from app.models.inventory import StockTransaction, ShopifyOrder
from app.models.bom import BOMComponent
from app.models.user import User
from app.models.attachment import Attachment

__all__ = [
    # Stock
    "Product",
    "ProductCategory",
    "StockTransaction",
    "ShopifyOrder",
    # Manufacturing
    "BOMComponent",
    # Users
    "User",
    # Documents
    "Attachment",
]
