"""
Unit tests for BOM helpers and maintenance operations
"""
import pytest

from app.exceptions import DuplicateError, NotFoundError
from app.models.bom import BOMComponent
from app.services import bom_service
from app.services.bom_service import (
    is_finished_good_row,
    parse_bom_quantity,
    resolve_component_product,
)
from tests.factories import create_test_bom, create_test_product, reset_sequences


class TestParseBomQuantity:
    """Tests for parse_bom_quantity()"""

    @pytest.mark.parametrize("raw,expected", [
        (2, 2),
        (0, 0),
        (2.9, 2),
        ("2", 2),
        ("  3", 3),
        ("1 UNIT", 1),
        ("2 UNITS", 2),
        ("+4 pcs", 4),
        ("-2", -2),
        ("Qty: 3", 3),
        ("0 or 5", 0),
        ("box of 12", 12),
        ("none", 0),
        ("", 0),
        (None, 0),
        (True, 0),
    ])
    def test_parse(self, raw, expected):
        assert parse_bom_quantity(raw) == expected


class TestFinishedGoodRows:
    """Tests for is_finished_good_row()"""

    @pytest.mark.parametrize("code", [
        None,
        "",
        "PRODUCT_CODE",
        "SA_CA Oil Cartridge",
        "Oil Refill 700ml",
        "Amber Bottle 1L",
    ])
    def test_skipped(self, code):
        assert is_finished_good_row(code)

    @pytest.mark.parametrize("code", ["SA_RM_00001", "SA_RAWM_00002", "product_code"])
    def test_components(self, code):
        assert not is_finished_good_row(code)


class TestResolveComponentProduct:
    """Tests for resolve_component_product()"""

    @pytest.fixture(autouse=True)
    def setup(self, db_session):
        """Reset sequences before each test."""
        reset_sequences()

    def test_exact_code(self, db_session):
        cap = create_test_product(db_session, product_code="SA_RM_00010")
        db_session.commit()

        assert resolve_component_product(db_session, "SA_RM_00010").id == cap.id

    def test_rawm_alias(self, db_session):
        cap = create_test_product(db_session, product_code="SA_RM_00010")
        db_session.commit()

        assert resolve_component_product(db_session, "SA_RAWM_00010").id == cap.id

    def test_exact_code_wins_over_alias(self, db_session):
        create_test_product(db_session, product_code="SA_RM_00010")
        legacy = create_test_product(db_session, product_code="SA_RAWM_00010")
        db_session.commit()

        assert resolve_component_product(db_session, "SA_RAWM_00010").id == legacy.id

    def test_unknown(self, db_session):
        assert resolve_component_product(db_session, "SA_RAWM_99999") is None


class TestBomMaintenance:
    """Tests for replace/add/update/delete of variant component lists"""

    @pytest.fixture(autouse=True)
    def setup(self, db_session):
        """Reset sequences before each test."""
        reset_sequences()

    def _three_components(self, db_session):
        create_test_bom(db_session, "SA_HF", [
            {"component_code": "SA_RM_00001", "component_name": "Cap", "quantity": 1},
            {"component_code": "SA_RM_00002", "component_name": "Label", "quantity": "2 UNIT"},
            {"component_code": "SA_RM_00003", "component_name": "Box", "quantity": 1},
        ])
        db_session.commit()

    def test_replace_numbers_in_list_order(self, db_session):
        rows = bom_service.replace_variant(db_session, "SA_1L", [
            {"component_code": "B", "component_name": "Second", "quantity": "3 UNIT"},
            {"component_code": "A", "component_name": "First", "quantity": 1},
        ])
        db_session.commit()

        assert [(r.seq, r.component_code) for r in rows] == [(1, "B"), (2, "A")]
        assert rows[0].quantity == "3 UNIT"
        assert rows[0].quantity_units == 3

    def test_replace_drops_previous_rows(self, db_session):
        self._three_components(db_session)

        bom_service.replace_variant(db_session, "SA_HF", [{"component_code": "X", "quantity": 1}])
        db_session.commit()

        codes = [c.component_code for c in bom_service.get_variant_components(db_session, "SA_HF")]
        assert codes == ["X"]

    def test_add_appends_and_creates_variant(self, db_session):
        rows = bom_service.add_component(db_session, "SA_PRO", "SA_RM_00009", "Pump", "1 UNIT")
        db_session.commit()

        assert [(r.seq, r.component_code, r.quantity_units) for r in rows] == [(1, "SA_RM_00009", 1)]

    def test_add_duplicate_code(self, db_session):
        self._three_components(db_session)

        with pytest.raises(DuplicateError):
            bom_service.add_component(db_session, "SA_HF", "SA_RM_00002")

    def test_update_keeps_name_when_blank(self, db_session):
        self._three_components(db_session)

        rows = bom_service.update_component(
            db_session, "SA_HF", "SA_RM_00002", {"component_name": "", "quantity": 5}
        )
        db_session.commit()

        label = rows[1]
        assert label.component_name == "Label"
        assert label.quantity == 5
        assert label.quantity_units == 5

    def test_update_without_quantity_keeps_quantity(self, db_session):
        self._three_components(db_session)

        rows = bom_service.update_component(
            db_session, "SA_HF", "SA_RM_00002", {"component_name": "Front Label"}
        )

        assert rows[1].component_name == "Front Label"
        assert rows[1].quantity == "2 UNIT"

    def test_update_unknown_variant_or_component(self, db_session):
        self._three_components(db_session)

        with pytest.raises(NotFoundError):
            bom_service.update_component(db_session, "SA_CDIFF", "SA_RM_00001", {})
        with pytest.raises(NotFoundError):
            bom_service.update_component(db_session, "SA_HF", "SA_RM_09999", {})

    def test_delete_resequences(self, db_session):
        """Deleting the last of three components leaves seq 1, 2."""
        self._three_components(db_session)

        remaining = bom_service.delete_component(db_session, "SA_HF", "SA_RM_00003")
        db_session.commit()

        assert [(c.seq, c.component_code) for c in remaining] == [(1, "SA_RM_00001"), (2, "SA_RM_00002")]

    def test_delete_from_middle_closes_gap(self, db_session):
        self._three_components(db_session)

        bom_service.delete_component(db_session, "SA_HF", "SA_RM_00001")
        db_session.commit()

        stored = bom_service.get_variant_components(db_session, "SA_HF")
        assert [(c.seq, c.component_code) for c in stored] == [(1, "SA_RM_00002"), (2, "SA_RM_00003")]

    def test_delete_last_component_removes_variant(self, db_session):
        bom_service.add_component(db_session, "SA_CA", "SA_RM_00001", "Cap", 1)
        db_session.commit()

        bom_service.delete_component(db_session, "SA_CA", "SA_RM_00001")
        db_session.commit()

        assert "SA_CA" not in bom_service.get_all_boms(db_session)
        assert db_session.query(BOMComponent).count() == 0
