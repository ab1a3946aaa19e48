"""
BOM Management Endpoints

Component lists per sellable variant (SA_CA, SA_HF, ...). Every write
returns the variant's list as it stands afterwards.
"""
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.bom import (
    BOMComponentCreate,
    BOMComponentResponse,
    BOMComponentUpdate,
    BOMMutationResponse,
    BOMReplaceRequest,
)
from app.services import bom_service

router = APIRouter(prefix="/bom", tags=["BOM Management"])


def _mutation_response(components) -> BOMMutationResponse:
    return BOMMutationResponse(
        bom=[BOMComponentResponse.model_validate(c) for c in components]
    )


@router.get("", response_model=Dict[str, List[BOMComponentResponse]])
async def get_all_boms(db: Session = Depends(get_db)):
    """Every variant's component list"""
    return {
        variant: [BOMComponentResponse.model_validate(c) for c in components]
        for variant, components in bom_service.get_all_boms(db).items()
    }


@router.get("/{variant}", response_model=List[BOMComponentResponse])
async def get_variant_bom(variant: str, db: Session = Depends(get_db)):
    """Component list of one variant; empty when the variant has none."""
    return bom_service.get_variant_components(db, variant)


@router.put("/{variant}", response_model=BOMMutationResponse)
def replace_variant_bom(variant: str, request: BOMReplaceRequest, db: Session = Depends(get_db)):
    """Replace the whole list. Sequence numbers follow list order."""
    components = bom_service.replace_variant(
        db, variant, [c.model_dump() for c in request.components]
    )
    response = _mutation_response(components)
    db.commit()
    return response


@router.post("/{variant}/component", response_model=BOMMutationResponse)
def add_component(variant: str, request: BOMComponentCreate, db: Session = Depends(get_db)):
    """Append a component (400 if the code is already listed)."""
    components = bom_service.add_component(
        db,
        variant,
        request.component_code,
        request.component_name,
        request.quantity,
    )
    response = _mutation_response(components)
    db.commit()
    return response


@router.put("/{variant}/component/{component_code}", response_model=BOMMutationResponse)
def update_component(
    variant: str,
    component_code: str,
    request: BOMComponentUpdate,
    db: Session = Depends(get_db),
):
    """Change a component's name and/or quantity."""
    components = bom_service.update_component(
        db, variant, component_code, request.model_dump(exclude_unset=True)
    )
    response = _mutation_response(components)
    db.commit()
    return response


@router.delete("/{variant}/component/{component_code}", response_model=BOMMutationResponse)
def delete_component(variant: str, component_code: str, db: Session = Depends(get_db)):
    """Remove a component; the rest are renumbered 1..N."""
    components = bom_service.delete_component(db, variant, component_code)
    response = _mutation_response(components)
    db.commit()
    return response
