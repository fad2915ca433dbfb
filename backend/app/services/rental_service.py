# Overview: Service-layer operations for equipment rentals taken from suppliers.

"""
Rental Service

Status values: pending, active, completed, overdue, cancelled.

- "Overdue" is derived on read: an active rental whose end_date has passed.
  The stored status stays "active" until the equipment is returned.
- Returning equipment moves active rentals to completed; rentals in any other
  status are left untouched.
- Bulk cancel applies to every listed rental regardless of status.
"""

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import Rental, Supplier
from ..validation import NotFoundError, ValidationError, enforce_rules_rental
from app.time_utils import add_days, utcnow

RENTAL_MUTABLE_FIELDS = {
    "supplier_id", "equipment_name", "equipment_type", "quantity", "start_date",
    "end_date", "rental_period", "daily_rate", "total_amount", "status", "notes",
}


def _apply(rental: Rental, patch: dict) -> None:
    for k, v in patch.items():
        if k in RENTAL_MUTABLE_FIELDS:
            setattr(rental, k, v)


def _require_supplier(supplier_id: str) -> None:
    if db.session.get(Supplier, supplier_id) is None:
        raise NotFoundError("Supplier not found")


def list_rentals() -> list[Rental]:
    return (
        db.session.query(Rental)
        .order_by(Rental.created_at.desc(), Rental.id.desc())
        .all()
    )


def list_active_rentals() -> list[Rental]:
    return (
        db.session.query(Rental)
        .filter(Rental.status == "active")
        .order_by(Rental.end_date.asc(), Rental.id.asc())
        .all()
    )


def list_overdue_rentals(*, now: datetime | None = None) -> list[Rental]:
    now = now or utcnow()
    return (
        db.session.query(Rental)
        .filter(Rental.status == "active", Rental.end_date < now)
        .order_by(Rental.end_date.asc(), Rental.id.asc())
        .all()
    )


def get_rental(rental_id: str) -> Rental:
    rental = db.session.get(Rental, rental_id)
    if rental is None:
        raise NotFoundError("Rental not found")
    return rental


def create_rental(*, patch: dict) -> Rental:
    enforce_rules_rental(patch)
    _require_supplier(patch["supplier_id"])

    rental = Rental()
    _apply(rental, patch)
    db.session.add(rental)
    db.session.commit()
    return rental


def update_rental(*, rental_id: str, patch: dict) -> Rental:
    rental = get_rental(rental_id)
    enforce_rules_rental(patch, start_date=rental.start_date, end_date=rental.end_date)
    if "supplier_id" in patch and patch["supplier_id"] != rental.supplier_id:
        _require_supplier(patch["supplier_id"])

    _apply(rental, patch)
    db.session.commit()
    return rental


def delete_rental(*, rental_id: str) -> None:
    rental = get_rental(rental_id)
    db.session.delete(rental)
    db.session.commit()


def return_rentals(*, rental_ids: list[str]) -> int:
    """Complete the given rentals that are currently active. Returns how many changed."""
    if not rental_ids:
        return 0
    rentals = (
        db.session.query(Rental)
        .filter(Rental.id.in_(rental_ids), Rental.status == "active")
        .all()
    )
    for rental in rentals:
        rental.status = "completed"
    db.session.commit()
    return len(rentals)


def renew_rental(
    *,
    rental_id: str,
    new_end_date: datetime | None = None,
    additional_days: int | None = None,
) -> Rental:
    """
    Extend a rental. An explicit new_end_date wins over additional_days,
    which is counted from the current end_date.
    """
    rental = get_rental(rental_id)

    if new_end_date is None:
        if additional_days is None:
            raise ValidationError("newEndDate or additionalDays is required")
        if additional_days <= 0:
            raise ValidationError("additionalDays must be > 0")
        try:
            new_end_date = add_days(rental.end_date, additional_days)
        except OverflowError:
            raise ValidationError("additionalDays is out of range")

    if new_end_date < rental.start_date:
        raise ValidationError("endDate must not be before startDate")

    rental.end_date = new_end_date
    db.session.commit()
    return rental


def update_notes(*, rental_id: str, notes: str | None) -> Rental:
    rental = get_rental(rental_id)
    rental.notes = notes
    db.session.commit()
    return rental


def bulk_cancel(*, rental_ids: list[str]) -> int:
    if not rental_ids:
        return 0
    rentals = db.session.query(Rental).filter(Rental.id.in_(rental_ids)).all()
    for rental in rentals:
        rental.status = "cancelled"
    db.session.commit()
    return len(rentals)
