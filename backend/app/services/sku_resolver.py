"""
SKU Resolver

Maps a Shopify line-item SKU to the product it sells.

Two kinds of SKU exist:
- oil variant SKUs, `<VARIANT>_<oil id>` (SA_CA_00001, SA_1L_00004), which
  sell a fixed volume of an OILS product and trigger the BOM cascade;
- direct SKUs, any other value listed in a product's shopify_skus, which
  sell the product one unit at a time.

A SKU carrying a variant prefix is only ever resolved as an oil variant.
"""
from typing import Dict, Iterable, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from app.core.settings import settings
from app.logging_config import get_logger
from app.models.product import Product, ProductCategory

logger = get_logger(__name__)

MATCH_OIL_VARIANT = "oil_variant"
MATCH_DIRECT = "direct"


class VariantSku(NamedTuple):
    variant_key: str
    oil_id: str


class SkuResolution(NamedTuple):
    """
    Result of resolving one SKU.

    `variant` is set whenever the SKU parsed as an oil variant, even when no
    product carries it; `product` is None when nothing matched.
    """
    sku: Optional[str]
    match_type: Optional[str]
    variant: Optional[VariantSku]
    product: Optional[Product]

    @property
    def resolved(self) -> bool:
        return self.product is not None


def _ordered_variant_keys(variant_keys: Iterable[str]) -> List[str]:
    # Longest prefix wins (SA_CDIFF before SA_C...), then alphabetical
    return sorted(variant_keys, key=lambda key: (-len(key), key))


def parse_variant_sku(
    sku: Optional[str],
    variant_keys: Optional[Iterable[str]] = None,
) -> Optional[VariantSku]:
    """
    Split an oil-variant SKU into (variant key, oil id).

    Returns None when the SKU does not start with `<variant>_` for any known
    variant, or when nothing follows the prefix.

    Example:
        >>> parse_variant_sku("SA_CA_00001", ["SA_CA", "SA_HF"])
        VariantSku(variant_key='SA_CA', oil_id='00001')
    """
    if not sku:
        return None
    if variant_keys is None:
        variant_keys = settings.variant_volumes.keys()

    for key in _ordered_variant_keys(variant_keys):
        prefix = f"{key}_"
        if sku.startswith(prefix):
            oil_id = sku[len(prefix):]
            if oil_id:
                return VariantSku(key, oil_id)
            return None
    return None


def _products_in_creation_order(db: Session, category: Optional[str] = None) -> List[Product]:
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category)
    return query.order_by(Product.created_at, Product.id).all()


def _sku_values(product: Product) -> Dict[str, str]:
    return product.shopify_skus or {}


def find_oil_product(db: Session, variant_key: str, sku: str) -> Optional[Product]:
    """The OILS product listing exactly `sku` under `variant_key`."""
    for product in _products_in_creation_order(db, ProductCategory.OILS.value):
        if _sku_values(product).get(variant_key) == sku:
            return product
    return None


def find_direct_product(db: Session, sku: str) -> Optional[Product]:
    """The first product, of any category, listing `sku` under any variant."""
    for product in _products_in_creation_order(db):
        if sku in _sku_values(product).values():
            return product
    return None


def resolve_sku(db: Session, sku: Optional[str]) -> SkuResolution:
    """
    Resolve a line-item SKU to its product.

    Unresolved SKUs are logged and returned with product=None; they are not
    an error.
    """
    variant = parse_variant_sku(sku)
    if variant:
        product = find_oil_product(db, variant.variant_key, sku)
        if not product:
            logger.warning(
                f"No oil product carries variant SKU {sku}",
                extra={"sku": sku, "variant_key": variant.variant_key, "oil_id": variant.oil_id},
            )
        return SkuResolution(sku, MATCH_OIL_VARIANT, variant, product)

    product = find_direct_product(db, sku) if sku else None
    if not product:
        logger.warning(f"Unresolved SKU {sku!r}", extra={"sku": sku})
        return SkuResolution(sku, None, None, None)
    return SkuResolution(sku, MATCH_DIRECT, None, product)
