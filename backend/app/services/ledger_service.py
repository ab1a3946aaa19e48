"""
Transaction Ledger

Append-only audit trail of stock movements. Entries snapshot the product
(code, name, category, unit) and its balance right after the mutation.
Entries are never updated or deleted.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.inventory import StockTransaction
from app.models.product import Product


def append_transaction(
    db: Session,
    product: Product,
    txn_type: str,
    quantity: int,
    notes: str = "",
    shopify_order_id: Optional[str] = None,
) -> StockTransaction:
    """
    Record a stock movement that has already been applied to `product`.

    The row is flushed so its id is available to the caller; it becomes
    durable with the caller's commit.
    """
    transaction = StockTransaction(
        product_id=product.id,
        product_code=product.product_code,
        product_name=product.name,
        category=product.category,
        type=txn_type,
        quantity=quantity,
        unit=product.unit,
        balance_after=product.current_stock,
        notes=notes or "",
        shopify_order_id=shopify_order_id,
    )
    db.add(transaction)
    db.flush()
    return transaction


def list_transactions(
    db: Session,
    product_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[StockTransaction]:
    """Ledger entries, most recent first."""
    query = db.query(StockTransaction)
    if product_id:
        query = query.filter(StockTransaction.product_id == product_id)
    query = query.order_by(StockTransaction.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()
