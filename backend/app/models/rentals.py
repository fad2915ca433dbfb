from __future__ import annotations

from ..extensions import db
from app.time_utils import to_utc_z, utcnow
from .common import generate_id, money_str

RENTAL_STATUSES = ("pending", "active", "completed", "overdue", "cancelled")
RENTAL_PERIODS = ("daily", "weekly", "biweekly", "monthly")


class Supplier(db.Model):
    """
    External party we rent equipment from (not an inventory vendor).
    """
    __tablename__ = "suppliers"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(64), nullable=True)
    address = db.Column(db.Text, nullable=True)
    # Tax id (CPF/CNPJ)
    document = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r}>"

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "document": self.document,
            "createdAt": to_utc_z(self.created_at),
        }


class Rental(db.Model):
    __tablename__ = "rentals"
    __table_args__ = (
        db.Index("ix_rentals_status_end", "status", "end_date"),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    supplier_id = db.Column(db.String(36), db.ForeignKey("suppliers.id"), nullable=False, index=True)

    equipment_name = db.Column(db.String(255), nullable=False)
    equipment_type = db.Column(db.String(255), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)

    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    rental_period = db.Column(db.String(16), nullable=False, default="daily")

    daily_rate = db.Column(db.Numeric(10, 2), nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(16), nullable=False, default="pending")
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    supplier = db.relationship("Supplier", backref=db.backref("rentals", lazy=True))

    def __repr__(self) -> str:
        return f"<Rental id={self.id} equipment={self.equipment_name!r} status={self.status}>"

    def to_dict(self, *, include_supplier: bool = True) -> dict:
        data = {
            "id": self.id,
            "supplierId": self.supplier_id,
            "equipmentName": self.equipment_name,
            "equipmentType": self.equipment_type,
            "quantity": self.quantity,
            "startDate": to_utc_z(self.start_date),
            "endDate": to_utc_z(self.end_date),
            "rentalPeriod": self.rental_period,
            "dailyRate": money_str(self.daily_rate),
            "totalAmount": money_str(self.total_amount),
            "status": self.status,
            "notes": self.notes,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
        if include_supplier:
            data["supplier"] = self.supplier.to_summary() if self.supplier else None
        return data
