"""
Product Service

Product records and their Shopify SKU mappings. Ids, tags and default
product codes are derived from a single running number shared by all
categories: the new product gets 1 + the highest numeric id suffix in use.
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.logging_config import get_logger
from app.models.product import Product, ProductCategory
from app.services.stock_service import boxes_for, recompute_boxes

logger = get_logger(__name__)

_TRAILING_NUMBER = re.compile(r"(\d+)$")


def next_product_number(db: Session) -> int:
    highest = 0
    for (product_id,) in db.query(Product.id).all():
        match = _TRAILING_NUMBER.search(product_id or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def list_products(db: Session, category: Optional[str] = None) -> List[Product]:
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category)
    return query.order_by(Product.created_at, Product.id).all()


def get_product(db: Session, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def create_product(db: Session, data: Dict[str, Any]) -> Product:
    """
    Create a product from validated fields (snake_case keys).

    Generated when missing:
        id:           <category lower>_<n>     oils_7
        tag:          #<CATEGORY><n:05>        #OILS00007
        product_code: <CATEGORY>_<n:05>        OILS_00007
    """
    category = data["category"]
    if isinstance(category, ProductCategory):
        category = category.value
    number = next_product_number(db)

    current_stock = data.get("current_stock") or 0
    unit_per_box = data.get("unit_per_box")

    product = Product(
        id=f"{category.lower()}_{number}",
        tag=data.get("tag") or f"#{category}{number:05d}",
        product_code=data.get("product_code") or f"{category}_{number:05d}",
        name=data["name"],
        category=category,
        unit=data.get("unit") or "units",
        current_stock=current_stock,
        min_stock_level=data.get("min_stock_level") or 0,
        shopify_skus=dict(data.get("shopify_skus") or {}),
        supplier=data.get("supplier") or "",
        supplier_code=data.get("supplier_code") or "",
        unit_per_box=unit_per_box or 1,
        stock_boxes=boxes_for(current_stock, unit_per_box),
    )
    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info(
        f"Created product {product.id} ({product.product_code})",
        extra={"product_id": product.id, "category": category},
    )
    return product


def update_product(db: Session, product_id: str, changes: Dict[str, Any]) -> Product:
    """
    Apply a partial update. The id is never changed; stock edits made here
    are corrections and do not write ledger entries.
    """
    product = get_product(db, product_id)

    for field, value in changes.items():
        if field == "id" or value is None:
            continue
        if isinstance(value, ProductCategory):
            value = value.value
        if field == "shopify_skus" and value is not None:
            value = dict(value)
        setattr(product, field, value)

    if changes.get("unit_per_box") is not None:
        # New box size: count whole boxes the same way create does
        product.stock_boxes = boxes_for(product.current_stock or 0, product.unit_per_box)
    else:
        recompute_boxes(product)
    product.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(product)

    logger.info(
        f"Updated product {product.id}",
        extra={"product_id": product.id, "fields": sorted(changes.keys())},
    )
    return product


def delete_product(db: Session, product_id: str) -> None:
    """Remove a product. Its ledger entries stay."""
    product = get_product(db, product_id)
    db.delete(product)
    db.commit()
    logger.info(f"Deleted product {product_id}", extra={"product_id": product_id})


def list_sku_mappings(db: Session) -> List[Dict[str, Any]]:
    """Flatten every product's shopify_skus into one row per variant."""
    mappings = []
    for product in list_products(db):
        for variant, sku in (product.shopify_skus or {}).items():
            mappings.append({
                "id": f"{product.id}_{variant}",
                "shopify_sku": sku,
                "product_id": product.id,
                "product_code": product.product_code,
                "product_name": product.name,
                "variant": variant,
                "category": product.category,
            })
    return mappings
