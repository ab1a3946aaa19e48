"""
Export Endpoints

Raw lists for spreadsheet export, and the whole store as one document.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.logging_config import get_logger
from app.schemas.product import ProductResponse
from app.schemas.stock import TransactionResponse
from app.services import ledger_service, product_service, snapshot_service

router = APIRouter(prefix="/export", tags=["Export"])

logger = get_logger(__name__)


@router.get("/products", response_model=List[ProductResponse])
async def export_products(db: Session = Depends(get_db)):
    return product_service.list_products(db)


@router.get("/transactions", response_model=List[TransactionResponse])
async def export_transactions(db: Session = Depends(get_db)):
    """Full ledger, most recent first"""
    return ledger_service.list_transactions(db)


@router.get("/snapshot")
async def export_snapshot(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Whole store in the legacy single-document layout (users, products,
    transactions, bom, attachments, shopify_orders). Passwords are omitted.
    """
    snapshot = snapshot_service.export_snapshot(db)
    logger.info(
        "Exported snapshot",
        extra={section: len(snapshot[section]) for section in snapshot_service.SECTIONS},
    )
    return snapshot
