# backend/app/routes/inventory.py
"""
Inventory movement routes.

Movements are append-only: there are no PUT/DELETE routes. Creating a
movement changes the referenced product's stock in the same transaction.
"""
from flask import Blueprint, current_app, request

from ..models import InventoryMovement
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    NotFoundError,
)


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory-movements")

MOVEMENT_POLICY = ModelValidationPolicy(
    writable_fields={"productId", "type", "quantity", "reason", "notes", "userId"},
    required_on_create={"productId", "type", "quantity", "reason"},
    field_map={"productId": "product_id", "userId": "user_id"},
)


@inventory_bp.get("")
def list_movements_route():
    """All movements with product and user summaries."""
    from ..services.inventory_service import list_movements

    try:
        rows = list_movements()
    except Exception:
        current_app.logger.exception("Failed to fetch inventory movements")
        return {"error": "Failed to fetch inventory movements"}, 500
    return [r.to_dict(include_details=True) for r in rows], 200


@inventory_bp.get("/product/<product_id>")
def list_product_movements_route(product_id: str):
    """Movements for a single product, in insertion order."""
    from ..services.inventory_service import list_movements

    try:
        rows = list_movements(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to fetch product movements")
        return {"error": "Failed to fetch product movements"}, 500
    return [r.to_dict(include_details=True) for r in rows], 200


@inventory_bp.post("")
def create_movement_route():
    """
    Record a movement.

    Body: {productId, type: in|out|adjustment, quantity, reason, notes?, userId?}
    quantity is a positive magnitude; in adds it, out and adjustment remove it.
    Returns the movement (with the updated product summary), 201.
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(
            model=InventoryMovement,
            payload=payload,
            policy=MOVEMENT_POLICY,
            partial=False,
        )
    except ValidationError as e:
        return {"error": str(e)}, 400

    from ..services.inventory_service import record_movement

    try:
        movement = record_movement(
            product_id=patch["product_id"],
            type=patch["type"],
            quantity=patch["quantity"],
            reason=patch["reason"],
            notes=patch.get("notes"),
            user_id=patch.get("user_id"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to record inventory movement")
        return {"error": "Internal server error"}, 500

    return movement.to_dict(include_details=True), 201
