"""
Unit tests for the fulfillment orchestrator
"""
import base64
import hashlib
import hmac

import pytest

from app.core.settings import settings
from app.exceptions import InvalidSignatureError
from app.models.inventory import ShopifyOrder, StockTransaction
from app.schemas.shopify import ShopifyOrderPayload
from app.services.fulfillment_service import (
    STATUS_PARTIAL,
    STATUS_RESOLVED,
    STATUS_UNRESOLVED,
    line_quantity,
    process_order,
    verify_webhook_signature,
)
from tests.factories import create_test_bom, create_test_product, reset_sequences


def sign(body: bytes, secret: str) -> str:
    return base64.b64encode(hmac.new(secret.encode(), body, hashlib.sha256).digest()).decode()


class TestWebhookSignature:
    """Tests for verify_webhook_signature()"""

    def test_disabled_without_secret(self):
        verify_webhook_signature(b"{}", None, secret="")

    def test_valid_signature(self):
        body = b'{"id": 1}'
        verify_webhook_signature(body, sign(body, "s3cret"), secret="s3cret")

    @pytest.mark.parametrize("signature", [None, "", "bm90LXRoZS1zaWduYXR1cmU="])
    def test_invalid_signature(self, signature):
        with pytest.raises(InvalidSignatureError):
            verify_webhook_signature(b'{"id": 1}', signature, secret="s3cret")


class TestLineQuantity:

    @pytest.mark.parametrize("raw,expected", [(None, 1), (0, 1), (1, 1), (4, 4)])
    def test_defaults_to_one(self, raw, expected):
        assert line_quantity(raw) == expected


class TestProcessOrder:
    """Tests for process_order()"""

    @pytest.fixture(autouse=True)
    def setup(self, db_session):
        """Reset sequences before each test."""
        reset_sequences()

    def test_mixed_order(self, db_session, sample_oil, sample_cartridge_bom):
        # Arrange
        spare = create_test_product(
            db_session, category="MACHINES_SPARES", current_stock=5,
            shopify_skus={"default": "WICK-10"},
        )
        db_session.commit()
        payload = ShopifyOrderPayload.model_validate({
            "id": 9001,
            "order_number": 1042,
            "line_items": [
                {"sku": "SA_CA_00001", "quantity": 1},
                {"sku": "WICK-10"},
                {"sku": "NOPE-1", "quantity": 3},
            ],
        })

        # Act
        result = process_order(db_session, payload)

        # Assert
        assert [r.status for r in result.results] == [STATUS_RESOLVED, STATUS_RESOLVED, STATUS_UNRESOLVED]
        assert result.summary.line_items == 3
        assert result.summary.resolved == 2
        assert result.summary.unresolved == 1
        assert result.summary.transactions_created == 4
        assert result.results[1].quantity == 1
        assert db_session.get(type(spare), spare.id).current_stock == 4

    def test_partially_applied_line(self, db_session, sample_oil):
        create_test_bom(db_session, "SA_HF", [
            {"component_code": "SA_RM_07777", "component_name": "Missing", "quantity": 1},
        ])
        db_session.commit()

        result = process_order(
            db_session,
            ShopifyOrderPayload.model_validate({"id": 9002, "line_items": [{"sku": "SA_HF_00001"}]}),
        )

        line = result.results[0]
        assert line.status == STATUS_PARTIAL
        assert line.variant_key == "SA_HF"
        assert line.oil_id == "00001"
        assert result.summary.partially_applied == 1

    def test_defaults_for_sparse_payload(self, db_session):
        result = process_order(db_session, ShopifyOrderPayload())

        log = db_session.query(ShopifyOrder).one()
        assert log.order_number == "TEST"
        assert log.fulfillment_status == "fulfilled"
        assert log.shopify_order_id == result.order_id
        assert result.order_id.isdigit()
        assert result.summary.line_items == 0

    def test_duplicate_delivery_is_flagged(self, db_session, sample_oil):
        payload = ShopifyOrderPayload.model_validate(
            {"id": 9003, "order_number": 1, "line_items": [{"sku": "SA_CA_00001"}]}
        )

        first = process_order(db_session, payload)
        second = process_order(db_session, payload)

        assert not first.duplicate_delivery
        assert second.duplicate_delivery
        assert not second.deductions_skipped
        assert db_session.query(StockTransaction).count() == 2
        assert db_session.query(ShopifyOrder).count() == 2

    def test_duplicate_delivery_can_skip_deductions(self, db_session, sample_oil, monkeypatch):
        monkeypatch.setattr(settings, "SHOPIFY_SKIP_DUPLICATE_ORDERS", True)
        payload = ShopifyOrderPayload.model_validate(
            {"id": 9004, "line_items": [{"sku": "SA_CA_00001"}]}
        )

        process_order(db_session, payload)
        second = process_order(db_session, payload)

        assert second.deductions_skipped
        assert second.results == []
        assert db_session.query(StockTransaction).count() == 1
        assert db_session.query(ShopifyOrder).count() == 2
