"""
Bill of Materials Pydantic Schemas
"""
from typing import List, Optional, Union

from pydantic import Field

from app.schemas.common import CamelModel

# Free-form BOM quantity: 2, "2", "1 UNIT"
BOMQuantity = Union[int, float, str]


# ============================================================================
# BOM Component Schemas
# ============================================================================

class BOMComponentCreate(CamelModel):
    """Add a component to a variant's BOM"""
    component_code: str = Field(..., min_length=1, max_length=100)
    component_name: Optional[str] = Field(None, max_length=255)
    quantity: Optional[BOMQuantity] = None


class BOMComponentIn(CamelModel):
    """
    Component inside a full-list replacement. Codes are optional here so
    spreadsheet imports with header rows round-trip; any `seq` sent by the
    client is ignored and recomputed from list order.
    """
    component_code: Optional[str] = Field(None, max_length=100)
    component_name: Optional[str] = Field(None, max_length=255)
    quantity: Optional[BOMQuantity] = None


class BOMComponentUpdate(CamelModel):
    """Update name and/or quantity of an existing component"""
    component_name: Optional[str] = Field(None, max_length=255)
    quantity: Optional[BOMQuantity] = None


class BOMReplaceRequest(CamelModel):
    """Replace the whole component list of a variant"""
    components: List[BOMComponentIn] = Field(default_factory=list)


class BOMComponentResponse(CamelModel):
    """BOM component as returned by the API"""
    seq: int
    component_code: Optional[str] = None
    component_name: Optional[str] = None
    quantity: Optional[BOMQuantity] = None


class BOMMutationResponse(CamelModel):
    """Result of any BOM write: the variant's list after the change"""
    success: bool = True
    bom: List[BOMComponentResponse] = Field(default_factory=list)
