"""
Product Endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.product import ProductCategory
from app.schemas.common import SuccessResponse
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate, SkuMappingResponse
from app.services import product_service

router = APIRouter(prefix="/products", tags=["Products"])

sku_router = APIRouter(prefix="/sku-mappings", tags=["Products"])


@router.get("", response_model=List[ProductResponse])
async def list_products(
    category: Optional[ProductCategory] = Query(None, description="Only this category"),
    db: Session = Depends(get_db),
):
    return product_service.list_products(db, category.value if category else None)


@router.post("", response_model=ProductResponse)
def create_product(request: ProductCreate, db: Session = Depends(get_db)):
    """
    Create a product.

    Id, tag and product code are generated from the next free number when
    not supplied (oils_7, #OILS00007, OILS_00007).
    """
    return product_service.create_product(db, request.model_dump())


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: Session = Depends(get_db)):
    return product_service.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: str, request: ProductUpdate, db: Session = Depends(get_db)):
    """Partial update; fields left out of the body are kept."""
    return product_service.update_product(db, product_id, request.model_dump(exclude_unset=True))


@router.delete("/{product_id}", response_model=SuccessResponse)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    return SuccessResponse()


@sku_router.get("", response_model=List[SkuMappingResponse])
async def list_sku_mappings(db: Session = Depends(get_db)):
    """One row per product variant SKU"""
    return product_service.list_sku_mappings(db)
