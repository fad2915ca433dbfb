# Overview: Service-layer operations for suppliers; encapsulates business logic and database work.

"""
Supplier Service

Suppliers are the external parties equipment is rented from. Every rental
references exactly one supplier, so a supplier with rentals cannot be deleted.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Supplier, Rental
from ..validation import ConflictError, NotFoundError

SUPPLIER_MUTABLE_FIELDS = {"name", "email", "phone", "address", "document"}


def list_suppliers() -> list[Supplier]:
    return db.session.query(Supplier).order_by(Supplier.name.asc(), Supplier.id.asc()).all()


def get_supplier(supplier_id: str) -> Supplier:
    supplier = db.session.get(Supplier, supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier not found")
    return supplier


def create_supplier(*, patch: dict) -> Supplier:
    supplier = Supplier()
    for k, v in patch.items():
        if k in SUPPLIER_MUTABLE_FIELDS:
            setattr(supplier, k, v)
    db.session.add(supplier)
    db.session.commit()
    return supplier


def update_supplier(*, supplier_id: str, patch: dict) -> Supplier:
    supplier = get_supplier(supplier_id)
    for k, v in patch.items():
        if k in SUPPLIER_MUTABLE_FIELDS:
            setattr(supplier, k, v)
    db.session.commit()
    return supplier


def delete_supplier(*, supplier_id: str) -> None:
    supplier = get_supplier(supplier_id)
    has_rentals = db.session.query(Rental.id).filter(Rental.supplier_id == supplier_id).first()
    if has_rentals is not None:
        raise ConflictError("Supplier has rentals and cannot be deleted.")
    db.session.delete(supplier)
    db.session.commit()
