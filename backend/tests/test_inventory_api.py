# Overview: Pytest coverage for the /api/inventory-movements routes.

import pytest

from app.models import InventoryMovement


def _movement(product_id, **overrides):
    body = {"productId": product_id, "type": "in", "quantity": 5, "reason": "Purchase"}
    body.update(overrides)
    return body


class TestCreateMovement:

    def test_in_movement_returns_201_and_updates_stock(self, client, db_session, product):
        response = client.post("/api/inventory-movements", json=_movement(product.id))

        assert response.status_code == 201
        data = response.get_json()
        assert data["type"] == "in"
        assert data["quantity"] == 5
        assert data["quantityDelta"] == 5
        assert data["product"]["quantity"] == 15
        assert data["user"] is None

        stock = client.get(f"/api/products/{product.id}").get_json()
        assert stock["quantity"] == 15

    def test_out_beyond_stock_goes_negative(self, client, db_session, product):
        response = client.post(
            "/api/inventory-movements",
            json=_movement(product.id, type="out", quantity=20),
        )

        assert response.status_code == 201
        assert response.get_json()["product"]["quantity"] == -10

    def test_adjustment_removes_stock(self, client, db_session, product):
        response = client.post(
            "/api/inventory-movements",
            json=_movement(product.id, type="adjustment", quantity=5, reason="Cycle count"),
        )

        assert response.status_code == 201
        data = response.get_json()
        assert data["quantity"] == 5
        assert data["quantityDelta"] == -5
        assert data["product"]["quantity"] == 5

    def test_with_user(self, client, db_session, product, user):
        response = client.post(
            "/api/inventory-movements",
            json=_movement(product.id, userId=user.id, notes="dock 2"),
        )

        assert response.status_code == 201
        data = response.get_json()
        assert data["userId"] == user.id
        assert data["notes"] == "dock 2"

    @pytest.mark.parametrize("body_update", [
        {"type": "transfer"},
        {"quantity": 0},
        {"quantity": -5},
        {"type": "adjustment", "quantity": -4},
        {"quantity": 2 ** 31},
        {"quantity": 2 ** 70},
        {"quantity": 2.5},
        {"quantity": "abc"},
        {"reason": ""},
        {"reason": None},
        {"unexpected": 1},
    ])
    def test_invalid_payload_returns_400(self, client, db_session, product, body_update):
        response = client.post("/api/inventory-movements", json=_movement(product.id, **body_update))

        assert response.status_code == 400
        assert "error" in response.get_json()
        assert db_session.query(InventoryMovement).count() == 0

    def test_missing_fields_returns_400(self, client, db_session):
        response = client.post("/api/inventory-movements", json={"type": "in"})

        assert response.status_code == 400
        assert "productId" in response.get_json()["error"]

    def test_non_object_body_returns_400(self, client, db_session):
        response = client.post("/api/inventory-movements", json=[1, 2, 3])

        assert response.status_code == 400

    def test_unknown_product_returns_404(self, client, db_session):
        response = client.post("/api/inventory-movements", json=_movement("does-not-exist"))

        assert response.status_code == 404
        assert db_session.query(InventoryMovement).count() == 0

    def test_unknown_user_returns_404(self, client, db_session, product):
        response = client.post("/api/inventory-movements", json=_movement(product.id, userId="ghost"))

        assert response.status_code == 404


class TestListMovements:

    def test_list_all_joins_product(self, client, db_session, product):
        client.post("/api/inventory-movements", json=_movement(product.id))
        client.post("/api/inventory-movements", json=_movement(product.id, type="out", quantity=3))

        response = client.get("/api/inventory-movements")

        assert response.status_code == 200
        rows = response.get_json()
        assert [r["type"] for r in rows] == ["in", "out"]
        assert rows[0]["product"]["code"] == "FI-001"

    def test_list_for_product_excludes_others(self, client, db_session, make_product):
        a = make_product()
        b = make_product()
        client.post("/api/inventory-movements", json=_movement(a.id))
        client.post("/api/inventory-movements", json=_movement(b.id))

        rows = client.get(f"/api/inventory-movements/product/{a.id}").get_json()

        assert len(rows) == 1
        assert rows[0]["productId"] == a.id

    def test_list_for_unknown_product_returns_404(self, client, db_session):
        response = client.get("/api/inventory-movements/product/nope")

        assert response.status_code == 404

    def test_movements_are_immutable(self, client, db_session, product):
        created = client.post("/api/inventory-movements", json=_movement(product.id)).get_json()

        assert client.put(f"/api/inventory-movements/{created['id']}", json={}).status_code in (404, 405)
        assert client.delete(f"/api/inventory-movements/{created['id']}").status_code in (404, 405)
