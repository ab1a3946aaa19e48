"""
Shopify Integration Endpoints

- POST /shopify/webhook: orders/fulfilled notification, deducts stock
- GET  /shopify/orders:  log of every notification received
"""
import json
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db.session import get_db
from app.exceptions import ValidationError
from app.logging_config import get_logger
from app.schemas.shopify import ShopifyOrderPayload, ShopifyOrderResponse, WebhookResponse
from app.services import fulfillment_service

router = APIRouter(prefix="/shopify", tags=["Shopify"])

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Shopify-Hmac-Sha256"


@router.post("/webhook", response_model=WebhookResponse)
async def shopify_webhook(request: Request, db: Session = Depends(get_db)):
    """
    Process a fulfilled order.

    The raw body is read first so the HMAC signature (when a secret is
    configured) is checked against exactly what Shopify sent. Every line
    item is resolved and deducted independently; the response reports what
    happened to each.
    """
    body = await request.body()
    fulfillment_service.verify_webhook_signature(body, request.headers.get(SIGNATURE_HEADER))

    try:
        data = json.loads(body) if body.strip() else {}
    except ValueError as e:
        raise ValidationError("Webhook body is not valid JSON") from e

    try:
        payload = ShopifyOrderPayload.model_validate(data)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors()) from e

    logger.info(
        "Shopify webhook received",
        extra={
            "shopify_order_id": payload.id,
            "order_number": payload.order_number,
            "line_items": len(payload.line_items or []),
        },
    )

    # Blocking DB work and retry backoff stay off the event loop
    result = await run_in_threadpool(
        fulfillment_service.process_order, db, payload, data.get("line_items"),
    )
    return WebhookResponse.model_validate(asdict(result))


@router.get("/orders", response_model=List[ShopifyOrderResponse])
async def list_orders(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Order log, most recent first."""
    return [ShopifyOrderResponse.from_log(entry) for entry in fulfillment_service.list_orders(db, limit)]
