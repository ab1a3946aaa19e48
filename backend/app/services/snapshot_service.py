"""
Snapshot Service

Moves the whole store in and out of the legacy single-document layout:

    {
        "users": [...], "products": [...], "transactions": [...],
        "bom": {"SA_CA": [...]}, "attachments": [...], "shopify_orders": [...]
    }

Field names inside the document are camelCase; transactions and orders are
listed newest first. Import only runs against an empty store.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.exceptions import InvalidStateError, ValidationError
from app.logging_config import get_logger
from app.models.attachment import Attachment
from app.models.bom import BOMComponent
from app.models.inventory import ShopifyOrder, StockTransaction
from app.models.product import Product
from app.models.user import User
from app.schemas.attachment import AttachmentResponse
from app.schemas.bom import BOMComponentResponse
from app.schemas.product import ProductResponse
from app.schemas.shopify import ShopifyOrderResponse
from app.schemas.stock import TransactionResponse
from app.schemas.user import UserResponse
from app.services.bom_service import parse_bom_quantity
from app.services.stock_service import boxes_for

logger = get_logger(__name__)

SECTIONS = ("users", "products", "transactions", "bom", "attachments", "shopify_orders")


def _parse_timestamp(value: Optional[str]) -> datetime:
    """ISO-8601 (with optional Z) -> naive UTC datetime; now when missing."""
    if not value:
        return datetime.utcnow()
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def store_is_empty(db: Session) -> bool:
    models = (User, Product, StockTransaction, BOMComponent, Attachment, ShopifyOrder)
    return all(db.query(model).first() is None for model in models)


def sync_user_id_sequence(db: Session) -> None:
    """
    Move the users id sequence past imported ids. SQLite autoincrement
    follows MAX(id) on its own; PostgreSQL keeps a separate sequence.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(text(
        "SELECT setval(pg_get_serial_sequence('users', 'id'), "
        "(SELECT COALESCE(MAX(id), 1) FROM users))"
    ))


def import_snapshot(db: Session, document: Dict[str, Any]) -> Dict[str, int]:
    """
    Load a legacy document into an empty store and commit.

    Product ids and user password hashes are kept as they are, so existing
    SKU mappings, ledger references and logins keep working. Ledger and
    order ids are reassigned in chronological order.

    Returns:
        Row counts per section

    Raises:
        ValidationError: the document is not a JSON object
        InvalidStateError: the store already holds data
    """
    if not isinstance(document, dict):
        raise ValidationError("Snapshot must be a JSON object")
    if not store_is_empty(db):
        raise InvalidStateError("Snapshot import requires an empty database")

    counts = {section: 0 for section in SECTIONS}

    for entry in document.get("users") or []:
        db.add(User(
            id=int(entry["id"]) if entry.get("id") is not None else None,
            name=entry["name"],
            password_hash=entry.get("password") or "",
            role=entry.get("role") or "user",
            created_at=_parse_timestamp(entry.get("createdAt")),
        ))
        counts["users"] += 1

    if counts["users"]:
        db.flush()
        sync_user_id_sequence(db)

    for entry in document.get("products") or []:
        current_stock = int(entry.get("currentStock") or 0)
        unit_per_box = entry.get("unitPerBox") or 1
        stock_boxes = entry.get("stockBoxes")
        db.add(Product(
            id=str(entry["id"]),
            tag=entry.get("tag"),
            product_code=entry.get("productCode") or str(entry["id"]),
            name=entry.get("name") or "",
            category=entry.get("category"),
            unit=entry.get("unit") or "units",
            current_stock=current_stock,
            min_stock_level=int(entry.get("minStockLevel") or 0),
            shopify_skus=dict(entry.get("shopifySkus") or {}),
            supplier=entry.get("supplier") or "",
            supplier_code=entry.get("supplierCode") or "",
            unit_per_box=unit_per_box,
            stock_boxes=stock_boxes if stock_boxes is not None else boxes_for(current_stock, unit_per_box),
            created_at=_parse_timestamp(entry.get("createdAt")),
            updated_at=_parse_timestamp(entry["updatedAt"]) if entry.get("updatedAt") else None,
        ))
        counts["products"] += 1

    # Oldest first so the newest entry gets the highest id
    for entry in reversed(document.get("transactions") or []):
        db.add(StockTransaction(
            product_id=str(entry.get("productId")),
            product_code=entry.get("productCode"),
            product_name=entry.get("productName"),
            category=entry.get("category"),
            type=entry.get("type"),
            quantity=int(entry.get("quantity") or 0),
            unit=entry.get("unit"),
            balance_after=int(entry.get("balanceAfter") or 0),
            notes=entry.get("notes") or "",
            shopify_order_id=_as_str(entry.get("shopifyOrderId")),
            created_at=_parse_timestamp(entry.get("createdAt")),
        ))
        counts["transactions"] += 1

    for variant_key, components in (document.get("bom") or {}).items():
        for seq, entry in enumerate(components or [], start=1):
            quantity = entry.get("quantity")
            db.add(BOMComponent(
                variant_key=variant_key,
                seq=seq,
                component_code=entry.get("componentCode"),
                component_name=entry.get("componentName"),
                quantity=quantity,
                quantity_units=parse_bom_quantity(quantity),
            ))
            counts["bom"] += 1

    for entry in document.get("attachments") or []:
        db.add(Attachment(
            file_name=entry.get("fileName") or entry.get("storedFileName"),
            stored_file_name=entry["storedFileName"],
            file_type=entry.get("fileType") or "application/octet-stream",
            file_size=int(entry.get("fileSize") or 0),
            file_path=entry.get("filePath") or f"/uploads/{entry['storedFileName']}",
            associated_oil_id=entry.get("associatedOilId") or "GENERAL",
            associated_oil_name=entry.get("associatedOilName") or "General Documents",
            uploaded_by=entry.get("uploadedBy") or "admin",
            notes=entry.get("notes") or "",
            upload_date=_parse_timestamp(entry.get("uploadDate")),
        ))
        counts["attachments"] += 1

    for entry in reversed(document.get("shopify_orders") or []):
        db.add(ShopifyOrder(
            shopify_order_id=_as_str(entry.get("id")) or "",
            order_number=_as_str(entry.get("orderNumber")),
            fulfillment_status=entry.get("fulfillmentStatus"),
            line_items=entry.get("lineItems"),
            received_at=_parse_timestamp(entry.get("receivedAt")),
        ))
        counts["shopify_orders"] += 1

    db.commit()
    logger.info("Imported legacy snapshot", extra={"counts": counts})
    return counts


def _dump(schema, rows) -> List[Dict[str, Any]]:
    return [schema.model_validate(row).model_dump(mode="json", by_alias=True) for row in rows]


def export_snapshot(db: Session) -> Dict[str, Any]:
    """The whole store in the legacy layout. Password hashes are left out."""
    bom: Dict[str, List[Dict[str, Any]]] = {}
    rows = (
        db.query(BOMComponent)
        .order_by(BOMComponent.variant_key, BOMComponent.seq, BOMComponent.id)
        .all()
    )
    for row in rows:
        bom.setdefault(row.variant_key, []).append(
            BOMComponentResponse.model_validate(row).model_dump(mode="json", by_alias=True)
        )

    orders = db.query(ShopifyOrder).order_by(ShopifyOrder.id.desc()).all()
    return {
        "users": _dump(UserResponse, db.query(User).order_by(User.id).all()),
        "products": _dump(ProductResponse, db.query(Product).order_by(Product.created_at, Product.id).all()),
        "transactions": _dump(TransactionResponse, db.query(StockTransaction).order_by(StockTransaction.id.desc()).all()),
        "bom": bom,
        "attachments": _dump(AttachmentResponse, db.query(Attachment).order_by(Attachment.id).all()),
        "shopify_orders": [
            ShopifyOrderResponse.from_log(order).model_dump(mode="json", by_alias=True)
            for order in orders
        ],
    }
