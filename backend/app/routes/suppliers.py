# Overview: Flask API routes for supplier operations; parses input and returns JSON responses.

"""
Supplier Routes

Suppliers are the companies equipment is rented from. /api/customers is the
name older clients used for the same resource and is kept as a read/create
alias.
"""

from flask import Blueprint, current_app, request

from ..models import Supplier
from ..services import supplier_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    NotFoundError,
    ConflictError,
)

SUPPLIER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phone", "address", "document"},
    required_on_create={"name", "email"},
)

suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")
customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


def list_suppliers_route():
    try:
        suppliers = supplier_service.list_suppliers()
    except Exception:
        current_app.logger.exception("Failed to fetch suppliers")
        return {"error": "Failed to fetch suppliers"}, 500
    return [s.to_dict() for s in suppliers], 200


def get_supplier_route(supplier_id: str):
    try:
        return supplier_service.get_supplier(supplier_id).to_dict(), 200
    except NotFoundError as e:
        return {"error": str(e)}, 404


def create_supplier_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        supplier = supplier_service.create_supplier(patch=patch)
    except Exception:
        current_app.logger.exception("Failed to create supplier")
        return {"error": "Internal server error"}, 500
    return supplier.to_dict(), 201


@suppliers_bp.put("/<supplier_id>")
def update_supplier_route(supplier_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=True)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        supplier = supplier_service.update_supplier(supplier_id=supplier_id, patch=patch)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return supplier.to_dict(), 200


@suppliers_bp.delete("/<supplier_id>")
def delete_supplier_route(supplier_id: str):
    try:
        supplier_service.delete_supplier(supplier_id=supplier_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    return "", 204


for bp in (suppliers_bp, customers_bp):
    bp.add_url_rule("", view_func=list_suppliers_route, methods=["GET"])
    bp.add_url_rule("", view_func=create_supplier_route, methods=["POST"])
    bp.add_url_rule("/<supplier_id>", view_func=get_supplier_route, methods=["GET"])
