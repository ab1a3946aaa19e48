"""
Fulfillment Orchestrator

Processes one Shopify order notification:

1. log the order (always, even when nothing resolves)
2. resolve every line item's SKU and run the BOM cascade for it
3. commit the whole order once

Line items are independent: an unresolved SKU or a missing component only
affects its own line and is reported in the result. The unit of work is
retried from the top on optimistic-lock conflicts, so a concurrent stock
change never loses a deduction.
"""
import base64
import hashlib
import hmac
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from app.core.settings import settings
from app.db.unit_of_work import run_unit_of_work
from app.exceptions import InvalidSignatureError
from app.logging_config import get_logger
from app.models.inventory import ShopifyOrder
from app.schemas.shopify import ShopifyOrderPayload
from app.services.bom_cascade import (
    BOMCascadeEngine,
    CascadeResult,
    Deduction,
    OrderReference,
    SkippedComponent,
)
from app.services.sku_resolver import MATCH_OIL_VARIANT, resolve_sku

logger = get_logger(__name__)

STATUS_RESOLVED = "resolved"
STATUS_PARTIAL = "partially_applied"
STATUS_UNRESOLVED = "unresolved"

DEFAULT_ORDER_NUMBER = "TEST"
DEFAULT_FULFILLMENT_STATUS = "fulfilled"


@dataclass
class LineItemResult:
    sku: Optional[str]
    quantity: int
    status: str
    match_type: Optional[str] = None
    variant_key: Optional[str] = None
    oil_id: Optional[str] = None
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    deductions: List[Deduction] = field(default_factory=list)
    skipped: List[SkippedComponent] = field(default_factory=list)


@dataclass
class FulfillmentSummary:
    line_items: int = 0
    resolved: int = 0
    partially_applied: int = 0
    unresolved: int = 0
    transactions_created: int = 0


@dataclass
class FulfillmentResult:
    order_id: str
    order_number: str
    duplicate_delivery: bool = False
    deductions_skipped: bool = False
    summary: FulfillmentSummary = field(default_factory=FulfillmentSummary)
    results: List[LineItemResult] = field(default_factory=list)


def verify_webhook_signature(body: bytes, signature: Optional[str], secret: Optional[str] = None) -> None:
    """
    Check the X-Shopify-Hmac-Sha256 header (base64 HMAC-SHA256 of the raw
    body). Verification is off when no secret is configured.

    Raises:
        InvalidSignatureError: header missing or not matching
    """
    secret = secret if secret is not None else settings.SHOPIFY_WEBHOOK_SECRET
    if not secret:
        return
    if not signature:
        raise InvalidSignatureError("Missing X-Shopify-Hmac-Sha256 header")

    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode("ascii")
    if not hmac.compare_digest(expected, signature.strip()):
        raise InvalidSignatureError()


def line_quantity(raw: Optional[int]) -> int:
    """Missing or zero quantities count as one unit."""
    return raw or 1


def _summarize(results: List[LineItemResult]) -> FulfillmentSummary:
    summary = FulfillmentSummary(line_items=len(results))
    for result in results:
        if result.status == STATUS_RESOLVED:
            summary.resolved += 1
        elif result.status == STATUS_PARTIAL:
            summary.partially_applied += 1
        else:
            summary.unresolved += 1
        summary.transactions_created += len(result.deductions)
    return summary


def _process_line(
    db: Session,
    engine: BOMCascadeEngine,
    sku: Optional[str],
    quantity: int,
    order: OrderReference,
) -> LineItemResult:
    resolution = resolve_sku(db, sku)
    result = LineItemResult(sku=sku, quantity=quantity, status=STATUS_UNRESOLVED, match_type=resolution.match_type)
    if resolution.variant:
        result.variant_key = resolution.variant.variant_key
        result.oil_id = resolution.variant.oil_id
    if not resolution.resolved:
        return result

    product = resolution.product
    result.product_id = product.id
    result.product_name = product.name

    if resolution.match_type == MATCH_OIL_VARIANT:
        cascade: CascadeResult = engine.deduct_oil_variant(
            product, resolution.variant.variant_key, quantity, order
        )
    else:
        cascade = engine.deduct_direct(product, quantity, order)

    result.deductions = cascade.deductions
    result.skipped = cascade.skipped
    result.status = STATUS_PARTIAL if cascade.has_failed_components else STATUS_RESOLVED
    return result


def _is_duplicate(db: Session, order_id: str) -> bool:
    return (
        db.query(ShopifyOrder.id)
        .filter(ShopifyOrder.shopify_order_id == order_id)
        .first()
        is not None
    )


def process_order(
    db: Session,
    payload: ShopifyOrderPayload,
    raw_line_items: Optional[List[Any]] = None,
) -> FulfillmentResult:
    """
    Apply a fulfilled order to stock and commit.

    `raw_line_items` is stored in the order log exactly as Shopify sent it;
    without it the items set on the payload are logged.

    Defaults for sparse payloads: order id -> current epoch milliseconds,
    order number -> "TEST" in the log ("N/A" in ledger notes), fulfillment
    status -> "fulfilled".

    Raises:
        ConcurrencyError: stock kept changing underneath for every attempt
    """
    # Fixed before the unit of work so a retry reuses the same id
    order_id = str(payload.id) if payload.id is not None else str(int(time.time() * 1000))
    order_number = str(payload.order_number) if payload.order_number is not None else None
    line_items = payload.line_items or []
    if raw_line_items is None and payload.line_items is not None:
        raw_line_items = [item.model_dump(exclude_unset=True) for item in line_items]

    def work(session: Session) -> FulfillmentResult:
        duplicate = _is_duplicate(session, order_id)
        skip_deductions = duplicate and settings.SHOPIFY_SKIP_DUPLICATE_ORDERS

        session.add(
            ShopifyOrder(
                shopify_order_id=order_id,
                order_number=order_number or DEFAULT_ORDER_NUMBER,
                fulfillment_status=payload.fulfillment_status or DEFAULT_FULFILLMENT_STATUS,
                line_items=raw_line_items,
            )
        )
        session.flush()

        result = FulfillmentResult(
            order_id=order_id,
            order_number=order_number or DEFAULT_ORDER_NUMBER,
            duplicate_delivery=duplicate,
            deductions_skipped=skip_deductions,
        )
        if skip_deductions:
            result.summary = FulfillmentSummary(line_items=len(line_items))
            return result

        engine = BOMCascadeEngine(session)
        order = OrderReference(order_id=order_id, order_number=order_number)
        for item in line_items:
            result.results.append(
                _process_line(session, engine, item.sku, line_quantity(item.quantity), order)
            )
        result.summary = _summarize(result.results)
        return result

    result = run_unit_of_work(db, work, description=f"Shopify order {order_id}")

    if result.duplicate_delivery:
        logger.warning(
            f"Shopify order {order_id} delivered more than once",
            extra={"shopify_order_id": order_id, "deductions_skipped": result.deductions_skipped},
        )
    logger.info(
        f"Processed Shopify order #{result.order_number}",
        extra={
            "shopify_order_id": order_id,
            "line_items": result.summary.line_items,
            "resolved": result.summary.resolved,
            "partially_applied": result.summary.partially_applied,
            "unresolved": result.summary.unresolved,
            "transactions_created": result.summary.transactions_created,
        },
    )
    return result


def list_orders(db: Session, limit: Optional[int] = None) -> List[ShopifyOrder]:
    """Order log, most recent first."""
    query = db.query(ShopifyOrder).order_by(ShopifyOrder.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()
