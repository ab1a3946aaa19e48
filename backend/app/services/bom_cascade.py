"""
BOM Cascade Engine

Turns a resolved, fulfilled line item into stock deductions:

- oil variant: the variant's oil volume times the quantity from the oil
  product, then every raw-material component of the variant's BOM;
- direct product: the quantity itself.

Deductions are applied through stock_service (clamped at zero) and each one
writes a ledger entry. Components that cannot be applied are skipped and
reported, never raised.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.settings import settings
from app.logging_config import get_logger
from app.models.product import Product
from app.services import bom_service, ledger_service, stock_service

logger = get_logger(__name__)

KIND_OIL = "oil"
KIND_COMPONENT = "component"
KIND_DIRECT = "direct"

SKIP_FINISHED_GOOD = "finished_good_row"
SKIP_NOT_FOUND = "component_not_found"
SKIP_INVALID_QUANTITY = "invalid_quantity"


@dataclass(frozen=True)
class OrderReference:
    """The order a deduction belongs to, as written into ledger notes."""
    order_id: str
    order_number: Optional[str] = None

    @property
    def label(self) -> str:
        return f"Shopify Order #{self.order_number or 'N/A'}"


@dataclass
class Deduction:
    kind: str
    product_id: str
    product_code: Optional[str]
    product_name: Optional[str]
    quantity: int
    balance_after: int
    shortfall: int
    transaction_id: int


@dataclass
class SkippedComponent:
    component_code: Optional[str]
    component_name: Optional[str]
    reason: str


@dataclass
class CascadeResult:
    deductions: List[Deduction] = field(default_factory=list)
    skipped: List[SkippedComponent] = field(default_factory=list)

    @property
    def has_failed_components(self) -> bool:
        """True when a real component could not be deducted."""
        return any(s.reason != SKIP_FINISHED_GOOD for s in self.skipped)


class BOMCascadeEngine:
    """
    Applies fulfillment deductions within one database session.

    Args:
        db: Session of the surrounding unit of work (not committed here)
        variant_volumes: mL per unit for each variant (defaults to settings)
    """

    def __init__(self, db: Session, variant_volumes: Optional[Dict[str, int]] = None):
        self.db = db
        self.variant_volumes = variant_volumes if variant_volumes is not None else settings.variant_volumes

    def _deduct(
        self,
        product: Product,
        quantity: int,
        kind: str,
        notes: str,
        order: OrderReference,
    ) -> Deduction:
        change = stock_service.remove_stock(product, quantity)
        transaction = ledger_service.append_transaction(
            self.db,
            product,
            stock_service.REMOVE,
            quantity,
            notes=notes,
            shopify_order_id=order.order_id,
        )
        logger.info(
            f"Deducted {quantity} {product.unit} of {product.product_code} for {order.label}",
            extra={
                "kind": kind,
                "product_id": product.id,
                "quantity": quantity,
                "balance_after": change.balance,
                "shopify_order_id": order.order_id,
                "transaction_id": transaction.id,
            },
        )
        return Deduction(
            kind=kind,
            product_id=product.id,
            product_code=product.product_code,
            product_name=product.name,
            quantity=quantity,
            balance_after=change.balance,
            shortfall=change.shortfall,
            transaction_id=transaction.id,
        )

    def deduct_oil_variant(
        self,
        product: Product,
        variant_key: str,
        quantity: int,
        order: OrderReference,
    ) -> CascadeResult:
        """
        Deduct one oil-variant line: oil volume first, then the BOM.

        A variant with no BOM rows deducts the oil only.
        """
        result = CascadeResult()

        volume = self.variant_volumes.get(variant_key, 0)
        result.deductions.append(
            self._deduct(
                product,
                volume * quantity,
                KIND_OIL,
                f"{order.label} - {variant_key}",
                order,
            )
        )

        for component in bom_service.get_variant_components(self.db, variant_key):
            code = component.component_code
            if bom_service.is_finished_good_row(code):
                result.skipped.append(
                    SkippedComponent(code, component.component_name, SKIP_FINISHED_GOOD)
                )
                continue

            target = bom_service.resolve_component_product(self.db, code)
            if not target:
                logger.warning(
                    f"BOM component {code} of {variant_key} has no matching product",
                    extra={"variant_key": variant_key, "component_code": code},
                )
                result.skipped.append(
                    SkippedComponent(code, component.component_name, SKIP_NOT_FOUND)
                )
                continue

            units = component.quantity_units
            if units is None or units <= 0:
                logger.warning(
                    f"BOM component {code} of {variant_key} has unusable quantity {component.quantity!r}",
                    extra={"variant_key": variant_key, "component_code": code},
                )
                result.skipped.append(
                    SkippedComponent(code, component.component_name, SKIP_INVALID_QUANTITY)
                )
                continue

            result.deductions.append(
                self._deduct(
                    target,
                    units * quantity,
                    KIND_COMPONENT,
                    f"{order.label} - BOM {variant_key}",
                    order,
                )
            )

        return result

    def deduct_direct(self, product: Product, quantity: int, order: OrderReference) -> CascadeResult:
        """Deduct a directly sold product (machines, spares, raw materials)."""
        result = CascadeResult()
        result.deductions.append(self._deduct(product, quantity, KIND_DIRECT, order.label, order))
        return result
