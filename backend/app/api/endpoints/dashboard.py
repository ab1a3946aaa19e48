"""
Dashboard Endpoint

Stock overview for the back-office home screen.
"""
import math

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.product import Product, ProductCategory
from app.schemas.dashboard import CategoryCounts, DashboardStats, StockValueTotals
from app.schemas.stock import TransactionResponse
from app.services import ledger_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

RECENT_TRANSACTIONS = 10


def oil_litres(total_ml: int) -> float:
    """mL -> litres, rounded half up to one decimal place."""
    return math.floor(total_ml / 100 + 0.5) / 10


@router.get("", response_model=DashboardStats)
async def get_dashboard_stats(db: Session = Depends(get_db)):
    """
    Totals for the dashboard:
    - product count and products below their minimum stock level
    - product count per category
    - stock on hand per category (oils in litres)
    - the 10 most recent ledger entries
    """
    products = db.query(Product).all()

    counts = {category: 0 for category in ProductCategory}
    stock = {category: 0 for category in ProductCategory}
    low_stock = 0
    for product in products:
        if (product.current_stock or 0) < (product.min_stock_level or 0):
            low_stock += 1
        try:
            category = ProductCategory(product.category)
        except ValueError:
            continue
        counts[category] += 1
        stock[category] += product.current_stock or 0

    return DashboardStats(
        total_products=len(products),
        low_stock_products=low_stock,
        by_category=CategoryCounts(
            oils=counts[ProductCategory.OILS],
            machines_spares=counts[ProductCategory.MACHINES_SPARES],
            raw_materials=counts[ProductCategory.RAW_MATERIALS],
        ),
        total_stock_value=StockValueTotals(
            oils=oil_litres(stock[ProductCategory.OILS]),
            machines_spares=stock[ProductCategory.MACHINES_SPARES],
            raw_materials=stock[ProductCategory.RAW_MATERIALS],
        ),
        recent_transactions=[
            TransactionResponse.model_validate(t)
            for t in ledger_service.list_transactions(db, limit=RECENT_TRANSACTIONS)
        ],
    )
