# Overview: Flask API routes for product categories.

from flask import Blueprint, current_app, request

from ..models import Category
from ..services import category_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    NotFoundError,
    ConflictError,
)

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
def list_categories_route():
    return [c.to_dict() for c in category_service.list_categories()], 200


@categories_bp.get("/<category_id>")
def get_category_route(category_id: str):
    try:
        return category_service.get_category(category_id).to_dict(), 200
    except NotFoundError as e:
        return {"error": str(e)}, 404


@categories_bp.post("")
def create_category_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        category = category_service.create_category(patch=patch)
    except Exception:
        current_app.logger.exception("Failed to create category")
        return {"error": "Internal server error"}, 500
    return category.to_dict(), 201


@categories_bp.put("/<category_id>")
def update_category_route(category_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=True)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        category = category_service.update_category(category_id=category_id, patch=patch)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return category.to_dict(), 200


@categories_bp.delete("/<category_id>")
def delete_category_route(category_id: str):
    try:
        category_service.delete_category(category_id=category_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    return "", 204
