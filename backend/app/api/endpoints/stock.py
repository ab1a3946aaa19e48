"""
Stock Adjustment and Ledger Endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.unit_of_work import run_unit_of_work
from app.schemas.product import ProductResponse
from app.schemas.stock import StockAdjustRequest, StockAdjustResponse, TransactionResponse
from app.services import ledger_service, stock_service

router = APIRouter(prefix="/stock", tags=["Stock"])

transactions_router = APIRouter(prefix="/transactions", tags=["Stock"])


@router.post("/adjust", response_model=StockAdjustResponse)
def adjust_stock(request: StockAdjustRequest, db: Session = Depends(get_db)):
    """
    Manually add or remove stock.

    `remove` never takes stock below zero. Each adjustment is recorded in
    the ledger.
    """
    def work(session: Session) -> StockAdjustResponse:
        result = stock_service.adjust_stock(
            session,
            request.product_id,
            request.quantity,
            request.type,
            request.notes,
        )
        # Serialized before commit expires the instances
        return StockAdjustResponse(
            product=ProductResponse.model_validate(result.product),
            transaction=TransactionResponse.model_validate(result.transaction),
        )

    return run_unit_of_work(db, work, description=f"stock adjustment of {request.product_id}")


@transactions_router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    product_id: Optional[str] = Query(None, alias="productId"),
    limit: Optional[int] = Query(None, ge=1, le=10000),
    db: Session = Depends(get_db),
):
    """Ledger, most recent first."""
    return ledger_service.list_transactions(db, product_id=product_id, limit=limit)
