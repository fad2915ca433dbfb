# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/app/routes/products.py
"""
Product management routes.

quantity is accepted on create (starting stock) but not on update: after
creation, stock only changes through /api/inventory-movements.
"""
from flask import Blueprint, current_app, request
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    NotFoundError,
    ConflictError,
)

PRODUCT_FIELD_MAP = {
    "categoryId": "category_id",
    "unitPrice": "unit_price",
    "minStock": "min_stock",
    "isRentable": "is_rentable",
}

PRODUCT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "code", "name", "description", "categoryId", "unitPrice",
        "quantity", "minStock", "isRentable",
    },
    required_on_create={"code", "name", "unitPrice"},
    field_map=PRODUCT_FIELD_MAP,
)

PRODUCT_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={
        "code", "name", "description", "categoryId", "unitPrice",
        "minStock", "isRentable",
    },
    field_map=PRODUCT_FIELD_MAP,
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products with their category.

    Query params:
    - status: in-stock | low-stock | out-of-stock (optional)
    - categoryId: only this category (optional)
    - search: substring of code or name (optional)
    """
    from ..services.products_service import list_products as list_products_service

    try:
        return list_products_service(
            status=request.args.get("status"),
            category_id=request.args.get("categoryId"),
            search=request.args.get("search"),
        ), 200
    except ValidationError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to fetch products")
        return {"error": "Failed to fetch products"}, 500


@products_bp.get("/low-stock")
def list_low_stock_route():
    """Products at or below their minimum stock."""
    from ..services.inventory_service import list_low_stock

    try:
        products = list_low_stock()
    except Exception:
        current_app.logger.exception("Failed to fetch low stock products")
        return {"error": "Failed to fetch low stock products"}, 500
    return [p.to_dict() for p in products], 200


@products_bp.get("/<product_id>")
def get_product_route(product_id: str):
    from ..services.products_service import get_product

    try:
        return get_product(product_id), 200
    except NotFoundError as e:
        return {"error": str(e)}, 404


@products_bp.post("")
def create_product_route():
    """Create a new product; returns 409 when the code is taken."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_CREATE_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    from ..services.products_service import create_product

    try:
        created = create_product(patch=patch)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return created, 201


@products_bp.put("/<product_id>")
def update_product_route(product_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_UPDATE_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    from ..services.products_service import update_product

    try:
        updated = update_product(product_id=product_id, patch=patch)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return updated, 200


@products_bp.delete("/<product_id>")
def delete_product_route(product_id: str):
    """Delete a product that has no movement history."""
    from ..services.products_service import delete_product

    try:
        delete_product(product_id=product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    return "", 204
