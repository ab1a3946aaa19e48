"""
API Router - mounted under settings.API_PREFIX (/api)
"""
from fastapi import APIRouter
from app.api.endpoints import (
    auth,
    users,
    products,
    stock,
    dashboard,
    shopify,
    bom,
    attachments,
    exports,
)

router = APIRouter()

# Authentication & users
router.include_router(auth.router)
router.include_router(users.router)

# Products & SKU mappings
router.include_router(products.router)
router.include_router(products.sku_router)

# Stock adjustments & ledger
router.include_router(stock.router)
router.include_router(stock.transactions_router)

# Dashboard
router.include_router(dashboard.router)

# Shopify fulfillment webhook
router.include_router(shopify.router)

# Bill of materials
router.include_router(bom.router)

# Documents
router.include_router(attachments.router)

# Exports
router.include_router(exports.router)
