"""
Unit tests for SKU resolution (oil variant vs direct product)
"""
import pytest

from app.services.sku_resolver import (
    MATCH_DIRECT,
    MATCH_OIL_VARIANT,
    VariantSku,
    find_direct_product,
    find_oil_product,
    parse_variant_sku,
    resolve_sku,
)
from tests.factories import create_test_product, reset_sequences

VARIANTS = ["SA_CA", "SA_HF", "SA_CDIFF", "SA_1L", "SA_PRO"]


class TestParseVariantSku:
    """Tests for parse_variant_sku()"""

    def test_splits_variant_and_oil_id(self):
        assert parse_variant_sku("SA_CA_00001", VARIANTS) == VariantSku("SA_CA", "00001")
        assert parse_variant_sku("SA_CDIFF_00042", VARIANTS) == VariantSku("SA_CDIFF", "00042")

    def test_uses_configured_variants_by_default(self):
        assert parse_variant_sku("SA_PRO_00005") == VariantSku("SA_PRO", "00005")

    @pytest.mark.parametrize("sku", [None, "", "SA_CA", "SA_CA_", "MACHINE-01", "XSA_CA_00001"])
    def test_non_variant_skus(self, sku):
        assert parse_variant_sku(sku, VARIANTS) is None

    def test_longest_prefix_wins(self):
        """SA_C_ and SA_CA_ both prefix SA_CA_00001; the longer key is used."""
        keys = ["SA_C", "SA_CA"]
        assert parse_variant_sku("SA_CA_00001", keys) == VariantSku("SA_CA", "00001")
        assert parse_variant_sku("SA_C_00001", keys) == VariantSku("SA_C", "00001")

    def test_precedence_does_not_depend_on_key_order(self):
        forward = parse_variant_sku("SA_CA_X_1", ["SA_CA", "SA_CA_X"])
        backward = parse_variant_sku("SA_CA_X_1", ["SA_CA_X", "SA_CA"])
        assert forward == backward == VariantSku("SA_CA_X", "1")


class TestProductLookup:
    """Tests for find_oil_product() / find_direct_product() / resolve_sku()"""

    @pytest.fixture(autouse=True)
    def setup(self, db_session):
        """Reset sequences before each test."""
        reset_sequences()

    def test_oil_lookup_requires_sku_under_the_variant_key(self, db_session):
        # Arrange
        oil = create_test_product(
            db_session, category="OILS", shopify_skus={"SA_CA": "SA_CA_00001"}
        )
        create_test_product(
            db_session, category="OILS", shopify_skus={"SA_HF": "SA_CA_00002"}
        )
        db_session.commit()

        # Act / Assert
        assert find_oil_product(db_session, "SA_CA", "SA_CA_00001").id == oil.id
        assert find_oil_product(db_session, "SA_CA", "SA_CA_00002") is None

    def test_oil_lookup_ignores_other_categories(self, db_session):
        create_test_product(
            db_session, category="RAW_MATERIALS", shopify_skus={"SA_CA": "SA_CA_00001"}
        )
        db_session.commit()

        assert find_oil_product(db_session, "SA_CA", "SA_CA_00001") is None

    def test_direct_lookup_matches_any_value(self, db_session):
        machine = create_test_product(
            db_session, category="MACHINES_SPARES", shopify_skus={"default": "DIFFUSER-PRO"}
        )
        db_session.commit()

        assert find_direct_product(db_session, "DIFFUSER-PRO").id == machine.id
        assert find_direct_product(db_session, "DIFFUSER") is None

    def test_resolve_oil_variant(self, db_session, sample_oil):
        resolution = resolve_sku(db_session, "SA_HF_00001")

        assert resolution.resolved
        assert resolution.match_type == MATCH_OIL_VARIANT
        assert resolution.variant == VariantSku("SA_HF", "00001")
        assert resolution.product.id == sample_oil.id

    def test_variant_sku_never_falls_back_to_direct(self, db_session):
        """A SKU shaped like a variant is unresolved even if listed as a direct SKU."""
        create_test_product(
            db_session, category="MACHINES_SPARES", shopify_skus={"default": "SA_CA_99999"}
        )
        db_session.commit()

        resolution = resolve_sku(db_session, "SA_CA_99999")

        assert not resolution.resolved
        assert resolution.match_type == MATCH_OIL_VARIANT
        assert resolution.variant.oil_id == "99999"

    def test_resolve_direct(self, db_session):
        spare = create_test_product(
            db_session, category="MACHINES_SPARES", shopify_skus={"default": "WICK-10"}
        )
        db_session.commit()

        resolution = resolve_sku(db_session, "WICK-10")

        assert resolution.match_type == MATCH_DIRECT
        assert resolution.variant is None
        assert resolution.product.id == spare.id

    @pytest.mark.parametrize("sku", [None, "", "UNKNOWN-1"])
    def test_unresolved(self, db_session, sku):
        resolution = resolve_sku(db_session, sku)

        assert not resolution.resolved
        assert resolution.match_type is None
        assert resolution.product is None
