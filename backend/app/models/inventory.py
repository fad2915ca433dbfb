from __future__ import annotations

from ..extensions import db
from app.time_utils import to_utc_z, utcnow
from .common import generate_id

MOVEMENT_IN = "in"
MOVEMENT_OUT = "out"
MOVEMENT_ADJUSTMENT = "adjustment"
MOVEMENT_TYPES = (MOVEMENT_IN, MOVEMENT_OUT, MOVEMENT_ADJUSTMENT)


class InventoryMovement(db.Model):
    """
    A single recorded change to a product's stock.

    Append-only: rows are created by inventory_service.record_movement and
    never updated or deleted.

    quantity is the magnitude the caller submitted; quantity_delta is the
    signed change actually applied (negative for out and adjustment).
    """
    __tablename__ = "inventory_movements"
    __table_args__ = (
        db.Index("ix_inventory_movements_product_created", "product_id", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    product_id = db.Column(db.String(36), db.ForeignKey("products.id"), nullable=False, index=True)

    type = db.Column(db.String(32), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    quantity_delta = db.Column(db.Integer, nullable=False)

    # Global insertion order, allocated from ledger_sequences in the write transaction
    sequence = db.Column(db.Integer, nullable=False, unique=True)

    reason = db.Column(db.String(255), nullable=False)
    notes = db.Column(db.Text, nullable=True)

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    product = db.relationship("Product", backref=db.backref("movements", lazy="dynamic"))
    user = db.relationship("User")

    def __repr__(self) -> str:
        return (
            f"<InventoryMovement id={self.id} product_id={self.product_id} "
            f"type={self.type} delta={self.quantity_delta}>"
        )

    def to_dict(self, *, include_details: bool = False) -> dict:
        data = {
            "id": self.id,
            "productId": self.product_id,
            "type": self.type,
            "quantity": self.quantity,
            "quantityDelta": self.quantity_delta,
            "sequence": self.sequence,
            "reason": self.reason,
            "notes": self.notes,
            "userId": self.user_id,
            "createdAt": to_utc_z(self.created_at),
        }
        if include_details:
            data["product"] = self.product.to_summary() if self.product else None
            data["user"] = self.user.to_summary() if self.user else None
        return data


class LedgerSequence(db.Model):
    """
    Named counters allocated with an atomic UPDATE ... SET next_value = next_value + 1.

    The row stays locked until the allocating transaction commits, so values
    are handed out in commit order.
    """
    __tablename__ = "ledger_sequences"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False, unique=True)
    next_value = db.Column(db.Integer, nullable=False, default=1)
