# Overview: Flask API routes for rentals; parses input and returns JSON responses.

"""
Rental routes.

A rental is equipment we rent *from* a supplier. Besides CRUD:
- /active and /overdue listings
- /return completes active rentals once the equipment goes back
- /<id>/renew extends the end date
- /<id>/notes replaces the notes
- /bulk-cancel cancels many rentals at once
"""

from flask import Blueprint, current_app, request

from ..models import Rental
from ..services import rental_service
from ..time_utils import parse_iso_datetime
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    NotFoundError,
)

RENTAL_FIELD_MAP = {
    "supplierId": "supplier_id",
    "equipmentName": "equipment_name",
    "equipmentType": "equipment_type",
    "startDate": "start_date",
    "endDate": "end_date",
    "rentalPeriod": "rental_period",
    "dailyRate": "daily_rate",
    "totalAmount": "total_amount",
}

RENTAL_POLICY = ModelValidationPolicy(
    writable_fields={
        "supplierId", "equipmentName", "equipmentType", "quantity", "startDate",
        "endDate", "rentalPeriod", "dailyRate", "totalAmount", "status", "notes",
    },
    required_on_create={
        "supplierId", "equipmentName", "quantity", "startDate", "endDate",
        "dailyRate", "totalAmount",
    },
    field_map=RENTAL_FIELD_MAP,
)

rentals_bp = Blueprint("rentals", __name__, url_prefix="/api/rentals")


def _id_list(payload: dict, key: str) -> list[str]:
    ids = payload.get(key)
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise ValidationError(f"{key} must be a list of rental ids")
    return ids


@rentals_bp.get("")
def list_rentals_route():
    """All rentals, newest first, with supplier summary."""
    try:
        rentals = rental_service.list_rentals()
    except Exception:
        current_app.logger.exception("Failed to fetch rentals")
        return {"error": "Failed to fetch rentals"}, 500
    return [r.to_dict() for r in rentals], 200


@rentals_bp.get("/active")
def list_active_rentals_route():
    return [r.to_dict() for r in rental_service.list_active_rentals()], 200


@rentals_bp.get("/overdue")
def list_overdue_rentals_route():
    """Active rentals whose end date has passed."""
    return [r.to_dict() for r in rental_service.list_overdue_rentals()], 200


@rentals_bp.get("/<rental_id>")
def get_rental_route(rental_id: str):
    try:
        return rental_service.get_rental(rental_id).to_dict(), 200
    except NotFoundError as e:
        return {"error": str(e)}, 404


@rentals_bp.post("")
def create_rental_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Rental, payload=payload, policy=RENTAL_POLICY, partial=False)
        rental = rental_service.create_rental(patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to create rental")
        return {"error": "Internal server error"}, 500
    return rental.to_dict(), 201


@rentals_bp.put("/<rental_id>")
def update_rental_route(rental_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Rental, payload=payload, policy=RENTAL_POLICY, partial=True)
        rental = rental_service.update_rental(rental_id=rental_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return rental.to_dict(), 200


@rentals_bp.delete("/<rental_id>")
def delete_rental_route(rental_id: str):
    try:
        rental_service.delete_rental(rental_id=rental_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return "", 204


@rentals_bp.post("/return")
def return_rentals_route():
    """
    Equipment returned to a supplier.

    Body: {supplierName, items: [rentalId, ...]}
    Only rentals that are currently active are completed.
    """
    payload = request.get_json(silent=True) or {}
    supplier_name = payload.get("supplierName")
    try:
        if not isinstance(supplier_name, str) or not supplier_name.strip():
            raise ValidationError("supplierName is required")
        items = _id_list(payload, "items")
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        completed = rental_service.return_rentals(rental_ids=items)
    except Exception:
        current_app.logger.exception("Failed to return equipment")
        return {"error": "Failed to return equipment"}, 500

    return {
        "success": True,
        "completed": completed,
        "message": f"{completed} item(s) returned to {supplier_name.strip()}",
    }, 200


@rentals_bp.put("/<rental_id>/renew")
def renew_rental_route(rental_id: str):
    """Body: {newEndDate} or {additionalDays}."""
    payload = request.get_json(silent=True) or {}
    try:
        raw_end = payload.get("newEndDate")
        try:
            new_end = parse_iso_datetime(raw_end) if isinstance(raw_end, str) else None
        except ValueError:
            raise ValidationError("newEndDate must be an ISO-8601 datetime")
        if raw_end is not None and new_end is None:
            raise ValidationError("newEndDate must be an ISO-8601 datetime")

        days = payload.get("additionalDays")
        if days is not None and (isinstance(days, bool) or not isinstance(days, int)):
            raise ValidationError("additionalDays must be an integer")

        rental = rental_service.renew_rental(
            rental_id=rental_id, new_end_date=new_end, additional_days=days
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"success": True, "message": "Rental renewed", "rental": rental.to_dict()}, 200


@rentals_bp.put("/<rental_id>/notes")
def update_notes_route(rental_id: str):
    payload = request.get_json(silent=True) or {}
    notes = payload.get("notes")
    if notes is not None and not isinstance(notes, str):
        return {"error": "notes must be a string"}, 400

    try:
        rental = rental_service.update_notes(rental_id=rental_id, notes=notes)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"success": True, "message": "Notes updated", "rental": rental.to_dict()}, 200


@rentals_bp.post("/bulk-cancel")
def bulk_cancel_route():
    """Body: {rentalIds: [...]}"""
    payload = request.get_json(silent=True) or {}
    try:
        rental_ids = _id_list(payload, "rentalIds")
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        cancelled = rental_service.bulk_cancel(rental_ids=rental_ids)
    except Exception:
        current_app.logger.exception("Failed to cancel rentals")
        return {"error": "Failed to cancel rentals"}, 500
    return {
        "success": True,
        "cancelled": cancelled,
        "message": f"{cancelled} rental(s) cancelled",
    }, 200
