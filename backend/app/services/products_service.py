# backend/app/services/products_service.py
"""
Products Service

Products are the stock-bearing entities of the inventory ledger.
- create_product seeds quantity and initial_quantity from the payload
- update_product never touches quantity (stock moves only via movements)
- delete_product refuses products that already have movements
"""
from __future__ import annotations
from sqlalchemy import or_

from ..extensions import db
from ..models import Product, Category, InventoryMovement
from ..validation import ConflictError, NotFoundError
from .inventory_service import stock_status_filter

PRODUCT_MUTABLE_FIELDS = {
    "code", "name", "description", "category_id", "unit_price", "min_stock", "is_rentable",
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _require_category(category_id: str | None) -> None:
    if category_id is None:
        return
    if db.session.get(Category, category_id) is None:
        raise NotFoundError("Category not found")


def _ensure_code_available(code: str, *, exclude_id: str | None = None) -> None:
    q = db.session.query(Product).filter(Product.code == code)
    if exclude_id is not None:
        q = q.filter(Product.id != exclude_id)
    if q.first() is not None:
        raise ConflictError("Product code already exists.")


def list_products(
    *,
    status: str | None = None,
    category_id: str | None = None,
    search: str | None = None,
) -> list[dict]:
    """
    Products with their category joined.

    Args:
        status: derived stock level (in-stock, low-stock, out-of-stock)
        category_id: only products in this category
        search: case-insensitive substring of code or name
    """
    q = db.session.query(Product)
    if status:
        q = stock_status_filter(q, status)
    if category_id:
        q = q.filter(Product.category_id == category_id)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(Product.name.ilike(pattern), Product.code.ilike(pattern)))

    products = q.order_by(Product.name.asc(), Product.id.asc()).all()
    return [p.to_dict() for p in products]


def get_product(product_id: str) -> dict:
    p = db.session.get(Product, product_id)
    if p is None:
        raise NotFoundError("Product not found")
    return p.to_dict()


def create_product(*, patch: dict) -> dict:
    """
    Create product using a validated patch dict.

    The optional starting quantity becomes initial_quantity, the implicit
    first movement of the product's ledger.

    Raises:
        ConflictError: code already used
        NotFoundError: category_id does not exist
    """
    _ensure_code_available(patch["code"])
    _require_category(patch.get("category_id"))

    starting = patch.get("quantity") or 0
    p = Product(quantity=starting, initial_quantity=starting)
    apply_product_patch(p, patch)
    if p.min_stock is None:
        p.min_stock = 0
    if p.is_rentable is None:
        p.is_rentable = True

    db.session.add(p)
    db.session.commit()
    return p.to_dict()


def update_product(*, product_id: str, patch: dict) -> dict:
    p = db.session.get(Product, product_id)
    if p is None:
        raise NotFoundError("Product not found")

    if "code" in patch and patch["code"] != p.code:
        _ensure_code_available(patch["code"], exclude_id=p.id)
    if "category_id" in patch:
        _require_category(patch["category_id"])

    apply_product_patch(p, patch)
    db.session.commit()
    return p.to_dict()


def delete_product(*, product_id: str) -> None:
    p = db.session.get(Product, product_id)
    if p is None:
        raise NotFoundError("Product not found")

    # The movement log is immutable, so a product with history stays.
    has_movements = (
        db.session.query(InventoryMovement.id)
        .filter(InventoryMovement.product_id == product_id)
        .first()
    )
    if has_movements is not None:
        raise ConflictError("Product has inventory movements and cannot be deleted.")

    db.session.delete(p)
    db.session.commit()
