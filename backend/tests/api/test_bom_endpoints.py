"""
Tests for the /bom endpoints
"""
import pytest

from tests.factories import create_test_bom, reset_sequences


class TestBomEndpoints:
    """Tests for GET/PUT /bom and component CRUD"""

    @pytest.fixture(autouse=True)
    def setup(self, db_session):
        """Reset sequences and seed a three-component SA_HF BOM."""
        reset_sequences()
        create_test_bom(db_session, "SA_HF", [
            {"component_code": "SA_RM_00001", "component_name": "Cap", "quantity": 1},
            {"component_code": "SA_RM_00002", "component_name": "Label", "quantity": "2 UNIT"},
            {"component_code": "SA_RM_00003", "component_name": "Box", "quantity": 1},
        ])
        db_session.commit()

    def test_get_all(self, client):
        response = client.get("/api/bom")

        assert response.status_code == 200
        data = response.json()
        assert list(data) == ["SA_HF"]
        assert data["SA_HF"][1] == {
            "seq": 2, "componentCode": "SA_RM_00002", "componentName": "Label", "quantity": "2 UNIT",
        }

    def test_get_variant(self, client):
        response = client.get("/api/bom/SA_HF")

        assert response.status_code == 200
        assert [c["seq"] for c in response.json()] == [1, 2, 3]

    def test_get_unknown_variant_is_empty(self, client):
        response = client.get("/api/bom/SA_PRO")

        assert response.status_code == 200
        assert response.json() == []

    def test_replace(self, client):
        response = client.put("/api/bom/SA_HF", json={"components": [
            {"seq": 9, "componentCode": "SA_RM_00005", "componentName": "Pump", "quantity": "1 UNIT"},
            {"componentCode": "SA_RM_00001", "componentName": "Cap", "quantity": 3},
        ]})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [(c["seq"], c["componentCode"]) for c in data["bom"]] == [(1, "SA_RM_00005"), (2, "SA_RM_00001")]
        assert client.get("/api/bom/SA_HF").json() == data["bom"]

    def test_add_component(self, client):
        response = client.post("/api/bom/SA_HF/component", json={
            "componentCode": "SA_RM_00004", "componentName": "Sleeve", "quantity": 1,
        })

        assert response.status_code == 200
        bom = response.json()["bom"]
        assert bom[-1] == {"seq": 4, "componentCode": "SA_RM_00004", "componentName": "Sleeve", "quantity": 1}

    def test_add_duplicate_component(self, client):
        response = client.post("/api/bom/SA_HF/component", json={"componentCode": "SA_RM_00002"})

        assert response.status_code == 400
        assert response.json()["message"] == "Component already exists in BOM"

    def test_update_component(self, client):
        response = client.put("/api/bom/SA_HF/component/SA_RM_00002", json={"quantity": "4 UNIT"})

        assert response.status_code == 200
        label = response.json()["bom"][1]
        assert label["componentName"] == "Label"
        assert label["quantity"] == "4 UNIT"

    def test_update_missing(self, client):
        assert client.put("/api/bom/SA_HF/component/NOPE", json={"quantity": 1}).status_code == 404
        assert client.put("/api/bom/SA_CDIFF/component/SA_RM_00001", json={"quantity": 1}).status_code == 404

    def test_delete_resequences(self, client):
        """Deleting the last of three components leaves seq 1, 2."""
        response = client.delete("/api/bom/SA_HF/component/SA_RM_00003")

        assert response.status_code == 200
        assert [c["seq"] for c in response.json()["bom"]] == [1, 2]

    def test_delete_first_renumbers(self, client):
        client.delete("/api/bom/SA_HF/component/SA_RM_00001")

        bom = client.get("/api/bom/SA_HF").json()
        assert [(c["seq"], c["componentCode"]) for c in bom] == [(1, "SA_RM_00002"), (2, "SA_RM_00003")]

    def test_delete_missing(self, client):
        assert client.delete("/api/bom/SA_HF/component/NOPE").status_code == 404
        assert client.delete("/api/bom/SA_CA/component/SA_RM_00001").status_code == 404
