from __future__ import annotations

from ..extensions import db
from app.time_utils import to_utc_z, utcnow
from .common import generate_id, money_str

STOCK_OUT = "out-of-stock"
STOCK_LOW = "low-stock"
STOCK_OK = "in-stock"
STOCK_STATUSES = (STOCK_OK, STOCK_LOW, STOCK_OUT)


def classify_stock(quantity: int, min_stock: int) -> str:
    """Derived stock level; never persisted."""
    if quantity == 0:
        return STOCK_OUT
    if quantity <= min_stock:
        return STOCK_LOW
    return STOCK_OK


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }


class Product(db.Model):
    """
    Inventory product (parts, tools, rentable equipment).

    LEDGER INVARIANT:
    quantity == initial_quantity + SUM(inventory_movements.quantity_delta)

    quantity is the authoritative current stock and is only changed by
    inventory_service.record_movement (atomic SQL increment). initial_quantity
    is the stock at creation, treated as an implicit first movement.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_category", "category_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    # Human-assigned, globally unique (e.g. "FI-001")
    code = db.Column(db.String(64), nullable=False, unique=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=True)

    unit_price = db.Column(db.Numeric(10, 2), nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=0)
    initial_quantity = db.Column(db.Integer, nullable=False, default=0)
    min_stock = db.Column(db.Integer, nullable=False, default=0)

    is_rentable = db.Column(db.Boolean, nullable=False, default=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    category = db.relationship("Category", backref=db.backref("products", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} code={self.code!r} quantity={self.quantity}>"

    @property
    def stock_status(self) -> str:
        return classify_stock(self.quantity, self.min_stock)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "quantity": self.quantity,
            "minStock": self.min_stock,
        }

    def to_dict(self, *, include_category: bool = True) -> dict:
        data = {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "categoryId": self.category_id,
            "unitPrice": money_str(self.unit_price),
            "quantity": self.quantity,
            "minStock": self.min_stock,
            "isRentable": self.is_rentable,
            "stockStatus": self.stock_status,
            "createdAt": to_utc_z(self.created_at),
        }
        if include_category:
            data["category"] = self.category.to_dict() if self.category else None
        return data
