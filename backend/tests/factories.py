"""
Test data factories for the inventory backend.

Provides functions to create test entities with sensible defaults.

Usage:
    from tests.factories import create_test_product, create_test_bom

    def test_something(db_session):
        oil = create_test_product(db_session, category="OILS", current_stock=5000)
        create_test_bom(db_session, "SA_CA", [{"component_code": "SA_RM_00001", "quantity": 1}])
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.security import hash_password


# =============================================================================
# SEQUENCE MANAGEMENT
# =============================================================================

_sequences: Dict[str, int] = {}


def reset_sequences():
    """Reset all sequences. Call between tests for predictable IDs."""
    global _sequences
    _sequences = {}


def _next(name: str) -> int:
    """Get next sequence number for a given entity type."""
    _sequences[name] = _sequences.get(name, 0) + 1
    return _sequences[name]


# =============================================================================
# USER FACTORY
# =============================================================================

def create_test_user(
    db: Session,
    name: Optional[str] = None,
    password: str = "TestPass123!",
    role: str = "user",
    **overrides
) -> "User":
    """
    Create a test user.

    Args:
        db: Database session
        name: Login name (auto-generated if not provided)
        password: Plain text password (will be hashed)
        role: 'admin' or 'user'
    """
    from app.models.user import User

    seq = _next("user")
    user = User(
        name=name or f"testuser{seq}",
        password_hash=hash_password(password),
        role=role,
        **overrides
    )
    db.add(user)
    db.flush()
    return user


# =============================================================================
# PRODUCT FACTORY
# =============================================================================

def create_test_product(
    db: Session,
    category: str = "RAW_MATERIALS",
    product_code: Optional[str] = None,
    name: Optional[str] = None,
    **overrides
) -> "Product":
    """
    Create a test product.

    Ids follow the application scheme (<category lower>_<n>) unless given.

    Args:
        db: Database session
        category: OILS, MACHINES_SPARES or RAW_MATERIALS
        product_code: Human facing code (auto-generated if not provided)
        name: Product name (auto-generated if not provided)
        **overrides: Additional field overrides (current_stock, shopify_skus, ...)
    """
    from app.models.product import Product

    seq = _next("product")
    product = Product(
        id=overrides.pop("id", f"{category.lower()}_{100 + seq}"),
        tag=overrides.pop("tag", f"#{category}{100 + seq:05d}"),
        product_code=product_code or f"{category}_{100 + seq:05d}",
        name=name or f"Test Product {seq}",
        category=category,
        unit=overrides.pop("unit", "units"),
        current_stock=overrides.pop("current_stock", 0),
        min_stock_level=overrides.pop("min_stock_level", 0),
        shopify_skus=overrides.pop("shopify_skus", {}),
        unit_per_box=overrides.pop("unit_per_box", 1),
        stock_boxes=overrides.pop("stock_boxes", 0),
        **overrides
    )
    db.add(product)
    db.flush()
    return product


# =============================================================================
# BOM FACTORY
# =============================================================================

def create_test_bom(
    db: Session,
    variant_key: str,
    components: List[Dict[str, Any]],
) -> List["BOMComponent"]:
    """
    Create a variant's BOM rows in list order (seq 1..N).

    Each component dict takes component_code, component_name and quantity.
    """
    from app.models.bom import BOMComponent
    from app.services.bom_service import parse_bom_quantity

    rows = []
    for seq, item in enumerate(components, start=1):
        row = BOMComponent(
            variant_key=variant_key,
            seq=seq,
            component_code=item.get("component_code"),
            component_name=item.get("component_name"),
            quantity=item.get("quantity"),
            quantity_units=parse_bom_quantity(item.get("quantity")),
        )
        db.add(row)
        rows.append(row)
    db.flush()
    return rows


# =============================================================================
# LEDGER FACTORY
# =============================================================================

def create_test_transaction(
    db: Session,
    product: "Product",
    txn_type: str = "add",
    quantity: int = 1,
    **overrides
) -> "StockTransaction":
    """Create a ledger entry for `product` without touching its stock."""
    from app.models.inventory import StockTransaction

    transaction = StockTransaction(
        product_id=product.id,
        product_code=product.product_code,
        product_name=product.name,
        category=product.category,
        type=txn_type,
        quantity=quantity,
        unit=product.unit,
        balance_after=overrides.pop("balance_after", product.current_stock),
        notes=overrides.pop("notes", ""),
        **overrides
    )
    db.add(transaction)
    db.flush()
    return transaction
