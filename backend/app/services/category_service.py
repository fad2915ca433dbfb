# Overview: Service-layer operations for product categories.

from __future__ import annotations

from ..extensions import db
from ..models import Category, Product
from ..validation import ConflictError, NotFoundError


def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.name.asc(), Category.id.asc()).all()


def get_category(category_id: str) -> Category:
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def create_category(*, patch: dict) -> Category:
    category = Category(name=patch["name"], description=patch.get("description"))
    db.session.add(category)
    db.session.commit()
    return category


def update_category(*, category_id: str, patch: dict) -> Category:
    category = get_category(category_id)
    for k, v in patch.items():
        setattr(category, k, v)
    db.session.commit()
    return category


def delete_category(*, category_id: str) -> None:
    category = get_category(category_id)
    in_use = db.session.query(Product.id).filter(Product.category_id == category_id).first()
    if in_use is not None:
        raise ConflictError("Category is assigned to products and cannot be deleted.")
    db.session.delete(category)
    db.session.commit()
