"""
Bill of Materials Service

Maintains the per-variant component lists consumed when an oil variant is
sold, and the helpers the cascade uses to read them:

- parse_bom_quantity: one tolerant parser for the free-form quantity column
- is_finished_good_row: rows describing the sold item itself, not a component
- resolve_component_product: component code -> stock product

A variant exists only through its component rows, so emptying a variant's
list removes the variant from the BOM mapping.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.core.settings import settings
from app.exceptions import DuplicateError, NotFoundError
from app.logging_config import get_logger
from app.models.bom import BOMComponent
from app.models.product import Product

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_ANY_DIGITS = re.compile(r"\d+")


def parse_bom_quantity(raw: Any) -> int:
    """
    Parse a BOM quantity into whole units.

    Accepts ints, floats and text such as "2", "1 UNIT" or "Qty: 3". The
    leading integer is used when present and non-zero; otherwise the first
    run of digits anywhere in the text; otherwise 0. Callers treat results
    <= 0 as "nothing to deduct".

    Examples:
        >>> parse_bom_quantity("1 UNIT")
        1
        >>> parse_bom_quantity("Qty: 3")
        3
        >>> parse_bom_quantity("none")
        0
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw)

    text = str(raw)
    match = _LEADING_INT.match(text)
    qty = int(match.group(1)) if match else 0
    if qty == 0:
        digits = _ANY_DIGITS.search(text)
        if digits:
            qty = int(digits.group(0))
    return qty


def is_finished_good_row(component_code: Optional[str]) -> bool:
    """
    True for rows that are not raw materials: blank codes, the spreadsheet
    header row and rows naming the finished item (oil cartridge, bottle...).
    """
    if not component_code:
        return True
    if component_code == settings.BOM_HEADER_CODE:
        return True
    return any(marker in component_code for marker in settings.BOM_FINISHED_GOOD_MARKERS)


def _product_by_code(db: Session, product_code: str) -> Optional[Product]:
    return (
        db.query(Product)
        .filter(Product.product_code == product_code)
        .order_by(Product.created_at, Product.id)
        .first()
    )


def resolve_component_product(db: Session, component_code: str) -> Optional[Product]:
    """
    Find the stock product for a BOM component code.

    Exact product_code match first, then the configured code aliases
    (the BOM sheet writes SA_RAWM_xxxxx where products use SA_RM_xxxxx).
    """
    product = _product_by_code(db, component_code)
    if product:
        return product

    for source, target in settings.component_code_aliases.items():
        if source in component_code:
            product = _product_by_code(db, component_code.replace(source, target, 1))
            if product:
                return product
    return None


# ============================================================================
# Reads
# ============================================================================

def get_variant_components(db: Session, variant_key: str) -> List[BOMComponent]:
    return (
        db.query(BOMComponent)
        .filter(BOMComponent.variant_key == variant_key)
        .order_by(BOMComponent.seq, BOMComponent.id)
        .all()
    )


def get_all_boms(db: Session) -> Dict[str, List[BOMComponent]]:
    """Every variant's component list, keyed by variant."""
    rows = (
        db.query(BOMComponent)
        .order_by(BOMComponent.variant_key, BOMComponent.seq, BOMComponent.id)
        .all()
    )
    boms: Dict[str, List[BOMComponent]] = {}
    for row in rows:
        boms.setdefault(row.variant_key, []).append(row)
    return boms


def _require_variant(db: Session, variant_key: str) -> List[BOMComponent]:
    components = get_variant_components(db, variant_key)
    if not components:
        raise NotFoundError("BOM variant", variant_key)
    return components


def _find_component(components: List[BOMComponent], component_code: str) -> Optional[BOMComponent]:
    for component in components:
        if component.component_code == component_code:
            return component
    return None


def _resequence(components: List[BOMComponent]) -> None:
    for index, component in enumerate(components, start=1):
        component.seq = index


# ============================================================================
# Writes (caller commits)
# ============================================================================

def replace_variant(
    db: Session,
    variant_key: str,
    components: Iterable[Dict[str, Any]],
) -> List[BOMComponent]:
    """
    Replace a variant's whole component list.

    Each item is a dict with component_code, component_name and quantity;
    positions become seq 1..N in list order.
    """
    db.query(BOMComponent).filter(BOMComponent.variant_key == variant_key).delete(
        synchronize_session=False
    )

    rows = []
    for seq, item in enumerate(components, start=1):
        quantity = item.get("quantity")
        row = BOMComponent(
            variant_key=variant_key,
            seq=seq,
            component_code=item.get("component_code"),
            component_name=item.get("component_name"),
            quantity=quantity,
            quantity_units=parse_bom_quantity(quantity),
        )
        db.add(row)
        rows.append(row)
    db.flush()

    logger.info(
        f"BOM for {variant_key} replaced with {len(rows)} components",
        extra={"variant_key": variant_key, "components": len(rows)},
    )
    return rows


def add_component(
    db: Session,
    variant_key: str,
    component_code: str,
    component_name: Optional[str] = None,
    quantity: Any = None,
) -> List[BOMComponent]:
    """
    Append a component to a variant, creating the variant if needed.

    Raises:
        DuplicateError: the variant already lists `component_code`
    """
    components = get_variant_components(db, variant_key)
    if _find_component(components, component_code):
        raise DuplicateError(
            "BOM component",
            field="componentCode",
            value=component_code,
            message="Component already exists in BOM",
        )

    row = BOMComponent(
        variant_key=variant_key,
        seq=len(components) + 1,
        component_code=component_code,
        component_name=component_name,
        quantity=quantity,
        quantity_units=parse_bom_quantity(quantity),
    )
    db.add(row)
    db.flush()

    logger.info(
        f"Added {component_code} to BOM {variant_key}",
        extra={"variant_key": variant_key, "component_code": component_code},
    )
    return components + [row]


def update_component(
    db: Session,
    variant_key: str,
    component_code: str,
    changes: Dict[str, Any],
) -> List[BOMComponent]:
    """
    Update name and/or quantity of one component.

    `changes` holds only the fields the client sent. A blank name keeps the
    current one; a quantity key, even null, replaces the stored quantity.

    Raises:
        NotFoundError: unknown variant or component
    """
    components = _require_variant(db, variant_key)
    component = _find_component(components, component_code)
    if not component:
        raise NotFoundError("BOM component", component_code)

    if changes.get("component_name"):
        component.component_name = changes["component_name"]
    if "quantity" in changes:
        component.quantity = changes["quantity"]
        component.quantity_units = parse_bom_quantity(changes["quantity"])
    db.flush()

    logger.info(
        f"Updated {component_code} in BOM {variant_key}",
        extra={"variant_key": variant_key, "component_code": component_code},
    )
    return components


def delete_component(db: Session, variant_key: str, component_code: str) -> List[BOMComponent]:
    """
    Remove one component and close the gap in the sequence.

    Raises:
        NotFoundError: unknown variant or component
    """
    components = _require_variant(db, variant_key)
    component = _find_component(components, component_code)
    if not component:
        raise NotFoundError("BOM component", component_code)

    db.delete(component)
    remaining = [c for c in components if c is not component]
    _resequence(remaining)
    db.flush()

    logger.info(
        f"Removed {component_code} from BOM {variant_key}",
        extra={"variant_key": variant_key, "component_code": component_code},
    )
    return remaining
