"""
Stock Mutation Service

The one place that changes Product.current_stock. Every mutation keeps the
box count in step and reports what was actually applied, so callers can
write an accurate ledger entry.

Deductions never drive stock negative: a removal larger than the current
stock empties it and the difference is reported as `shortfall`.
"""
from datetime import datetime
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationError
from app.logging_config import get_logger
from app.models.product import Product
from app.models.inventory import StockTransaction
from app.services import ledger_service

logger = get_logger(__name__)

ADD = "add"
REMOVE = "remove"


class StockChange(NamedTuple):
    """Outcome of a single stock mutation"""
    previous: int
    balance: int
    requested: int
    shortfall: int


class AdjustmentResult(NamedTuple):
    product: Product
    transaction: StockTransaction


def boxes_for(current_stock: int, unit_per_box: Optional[int]) -> int:
    """Whole boxes held at `current_stock`; 0 when the product is not boxed."""
    if not unit_per_box or unit_per_box < 1:
        return 0
    return current_stock // unit_per_box


def recompute_boxes(product: Product) -> None:
    """
    Refresh stock_boxes after a stock change.

    Only boxed products (unit_per_box > 1) are touched; for the rest the
    stored value is left as it is.
    """
    if product.unit_per_box and product.unit_per_box > 1:
        product.stock_boxes = boxes_for(product.current_stock or 0, product.unit_per_box)


def add_stock(product: Product, quantity: int) -> StockChange:
    previous = product.current_stock or 0
    product.current_stock = previous + quantity
    product.updated_at = datetime.utcnow()
    recompute_boxes(product)
    return StockChange(previous, product.current_stock, quantity, 0)


def remove_stock(product: Product, quantity: int) -> StockChange:
    """Deduct `quantity`, clamping at zero."""
    previous = product.current_stock or 0
    balance = max(0, previous - quantity)
    product.current_stock = balance
    product.updated_at = datetime.utcnow()
    recompute_boxes(product)

    shortfall = quantity - (previous - balance)
    if shortfall:
        logger.warning(
            f"Stock shortfall on {product.product_code}: requested {quantity}, had {previous}",
            extra={
                "product_id": product.id,
                "requested": quantity,
                "previous": previous,
                "shortfall": shortfall,
            },
        )
    return StockChange(previous, balance, quantity, shortfall)


def apply(product: Product, txn_type: str, quantity: int) -> StockChange:
    if txn_type == ADD:
        return add_stock(product, quantity)
    if txn_type == REMOVE:
        return remove_stock(product, quantity)
    raise ValidationError(f"Unknown adjustment type: {txn_type}", field="type", value=txn_type)


def adjust_stock(
    db: Session,
    product_id: str,
    quantity: int,
    txn_type: str,
    notes: Optional[str] = None,
) -> AdjustmentResult:
    """
    Manual stock adjustment from the back office.

    Applies the change and appends its ledger entry in the current session;
    the caller commits (see run_unit_of_work).

    Raises:
        NotFoundError: unknown product
        ValidationError: non-positive quantity or unknown type
    """
    if quantity is None or quantity <= 0:
        raise ValidationError("Quantity must be greater than zero", field="quantity", value=quantity)

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product", product_id)

    change = apply(product, txn_type, quantity)
    transaction = ledger_service.append_transaction(
        db,
        product,
        txn_type,
        quantity,
        notes=notes or "",
    )

    logger.info(
        f"Manual stock {txn_type} on {product.product_code}: {quantity} {product.unit}",
        extra={
            "product_id": product.id,
            "type": txn_type,
            "quantity": quantity,
            "previous": change.previous,
            "balance_after": change.balance,
            "transaction_id": transaction.id,
        },
    )
    return AdjustmentResult(product, transaction)
