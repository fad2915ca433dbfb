# Overview: Pytest coverage for supplier and rental routes.

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.models import Rental
from app.time_utils import utcnow


@pytest.fixture
def make_rental(db_session, supplier):
    def _make(status="active", end_date=None, total="700.00", name="Scissor Lift"):
        start = datetime(2026, 1, 1)
        rental = Rental(
            supplier_id=supplier.id,
            equipment_name=name,
            quantity=1,
            start_date=start,
            end_date=end_date or (start + timedelta(days=7)),
            daily_rate=Decimal("100.00"),
            total_amount=Decimal(total),
            status=status,
        )
        db_session.add(rental)
        db_session.commit()
        return rental

    return _make


def _rental_body(supplier_id, **overrides):
    body = {
        "supplierId": supplier_id,
        "equipmentName": "Hydraulic Excavator",
        "equipmentType": "Heavy Machinery",
        "quantity": 1,
        "startDate": "2024-01-15",
        "endDate": "2024-01-20",
        "dailyRate": "350.00",
        "totalAmount": "1750.00",
    }
    body.update(overrides)
    return body


class TestSuppliers:

    def test_supplier_crud(self, client, db_session):
        created = client.post("/api/suppliers", json={
            "name": "Heavy Lift Co", "email": "ops@heavylift.example", "document": "12.345.678/0001-90",
        })
        assert created.status_code == 201
        supplier_id = created.get_json()["id"]

        updated = client.put(f"/api/suppliers/{supplier_id}", json={"phone": "555-0199"})
        assert updated.get_json()["phone"] == "555-0199"

        assert client.get(f"/api/suppliers/{supplier_id}").get_json()["name"] == "Heavy Lift Co"
        assert client.delete(f"/api/suppliers/{supplier_id}").status_code == 204
        assert client.get(f"/api/suppliers/{supplier_id}").status_code == 404

    def test_supplier_requires_email(self, client, db_session):
        assert client.post("/api/suppliers", json={"name": "No Email"}).status_code == 400

    def test_customers_alias(self, client, db_session, supplier):
        rows = client.get("/api/customers").get_json()

        assert [r["id"] for r in rows] == [supplier.id]
        assert client.get(f"/api/customers/{supplier.id}").status_code == 200

    def test_supplier_with_rentals_cannot_be_deleted(self, client, db_session, supplier, make_rental):
        make_rental()

        assert client.delete(f"/api/suppliers/{supplier.id}").status_code == 409


class TestRentalCRUD:

    def test_create_rental(self, client, db_session, supplier):
        response = client.post("/api/rentals", json=_rental_body(supplier.id))

        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "pending"
        assert data["rentalPeriod"] == "daily"
        assert data["startDate"] == "2024-01-15T00:00:00Z"
        assert data["totalAmount"] == "1750.00"
        assert data["supplier"]["name"] == supplier.name

    def test_create_rental_unknown_supplier(self, client, db_session):
        assert client.post("/api/rentals", json=_rental_body("nope")).status_code == 404

    @pytest.mark.parametrize("body_update", [
        {"endDate": "2024-01-01"},
        {"status": "lost"},
        {"rentalPeriod": "hourly"},
        {"quantity": 0},
        {"startDate": "not a date"},
        {"dailyRate": "-5"},
    ])
    def test_create_rental_invalid(self, client, db_session, supplier, body_update):
        response = client.post("/api/rentals", json=_rental_body(supplier.id, **body_update))

        assert response.status_code == 400

    def test_list_newest_first(self, client, db_session, supplier):
        first = client.post("/api/rentals", json=_rental_body(supplier.id, equipmentName="A")).get_json()
        second = client.post("/api/rentals", json=_rental_body(supplier.id, equipmentName="B")).get_json()

        ids = [r["id"] for r in client.get("/api/rentals").get_json()]

        assert ids == [second["id"], first["id"]]

    def test_update_and_delete(self, client, db_session, make_rental):
        rental = make_rental(status="pending")

        updated = client.put(f"/api/rentals/{rental.id}", json={"status": "active"})
        assert updated.get_json()["status"] == "active"

        assert client.delete(f"/api/rentals/{rental.id}").status_code == 204
        assert client.get(f"/api/rentals/{rental.id}").status_code == 404

    def test_update_rejects_end_before_existing_start(self, client, db_session, make_rental):
        rental = make_rental()

        response = client.put(f"/api/rentals/{rental.id}", json={"endDate": "2025-12-01"})

        assert response.status_code == 400


class TestRentalWorkflow:

    def test_active_and_overdue(self, client, db_session, make_rental):
        overdue = make_rental(end_date=datetime(2020, 1, 1))
        current = make_rental(end_date=utcnow() + timedelta(days=30))
        make_rental(status="completed", end_date=datetime(2020, 1, 1))

        active_ids = {r["id"] for r in client.get("/api/rentals/active").get_json()}
        overdue_ids = {r["id"] for r in client.get("/api/rentals/overdue").get_json()}

        assert active_ids == {overdue.id, current.id}
        assert overdue_ids == {overdue.id}

    def test_return_completes_only_active(self, client, db_session, make_rental):
        active = make_rental()
        pending = make_rental(status="pending")

        response = client.post("/api/rentals/return", json={
            "supplierName": "ABC Equipment Rentals",
            "items": [active.id, pending.id],
        })

        assert response.status_code == 200
        assert response.get_json()["completed"] == 1
        db_session.expire_all()
        assert db_session.get(Rental, active.id).status == "completed"
        assert db_session.get(Rental, pending.id).status == "pending"

    def test_return_requires_items(self, client, db_session):
        response = client.post("/api/rentals/return", json={"supplierName": "X", "items": "r1"})

        assert response.status_code == 400

    def test_renew_by_days(self, client, db_session, make_rental):
        rental = make_rental()

        response = client.put(f"/api/rentals/{rental.id}/renew", json={"additionalDays": 3})

        assert response.status_code == 200
        assert response.get_json()["rental"]["endDate"] == "2026-01-11T00:00:00Z"

    def test_renew_with_explicit_date(self, client, db_session, make_rental):
        rental = make_rental()

        response = client.put(f"/api/rentals/{rental.id}/renew", json={"newEndDate": "2026-02-01T12:00:00Z"})

        assert response.get_json()["rental"]["endDate"] == "2026-02-01T12:00:00Z"

    def test_renew_requires_date_or_days(self, client, db_session, make_rental):
        rental = make_rental()

        assert client.put(f"/api/rentals/{rental.id}/renew", json={}).status_code == 400
        assert client.put(f"/api/rentals/{rental.id}/renew", json={"additionalDays": "3"}).status_code == 400

    def test_renew_days_out_of_range(self, client, db_session, make_rental):
        rental = make_rental()

        response = client.put(f"/api/rentals/{rental.id}/renew", json={"additionalDays": 10 ** 9})

        assert response.status_code == 400
        assert response.get_json()["error"] == "additionalDays is out of range"
        assert client.get(f"/api/rentals/{rental.id}").get_json()["endDate"] == "2026-01-08T00:00:00Z"

    def test_renew_missing_rental(self, client, db_session):
        assert client.put("/api/rentals/nope/renew", json={"additionalDays": 1}).status_code == 404

    def test_update_notes(self, client, db_session, make_rental):
        rental = make_rental()

        response = client.put(f"/api/rentals/{rental.id}/notes", json={"notes": "Call before pickup"})

        assert response.status_code == 200
        assert response.get_json()["rental"]["notes"] == "Call before pickup"

    def test_bulk_cancel(self, client, db_session, make_rental):
        a = make_rental()
        b = make_rental(status="pending")
        c = make_rental()

        response = client.post("/api/rentals/bulk-cancel", json={"rentalIds": [a.id, b.id]})

        assert response.get_json()["cancelled"] == 2
        db_session.expire_all()
        assert db_session.get(Rental, a.id).status == "cancelled"
        assert db_session.get(Rental, b.id).status == "cancelled"
        assert db_session.get(Rental, c.id).status == "active"

    def test_bulk_cancel_requires_list(self, client, db_session):
        assert client.post("/api/rentals/bulk-cancel", json={}).status_code == 400
