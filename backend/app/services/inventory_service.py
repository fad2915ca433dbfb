# Overview: Inventory ledger; records movements and keeps product stock consistent.

# backend/app/services/inventory_service.py

from __future__ import annotations

from flask import current_app
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Product, InventoryMovement, LedgerSequence, User
from ..models.catalog import STOCK_LOW, STOCK_OK, STOCK_OUT
from ..models.inventory import MOVEMENT_IN, MOVEMENT_TYPES
from ..validation import INT_MAX, INT_MIN, NotFoundError, ValidationError, enforce_rules_movement
from .concurrency import lock_for_update, run_with_retry
"""
Inventory Ledger Invariants (authoritative)

Quantity model:
- products.quantity is the authoritative current stock.
- It always equals products.initial_quantity + SUM(inventory_movements.quantity_delta).
- The initial quantity given at product creation is the implicit first movement.

Movement semantics:
- quantity is always a positive magnitude; the sign comes from the type.
- in:         delta = +quantity
- out:        delta = -quantity; no floor at zero, stock may go negative
- adjustment: delta = -quantity (a correction that removes stock: shrinkage,
              damage, count shortfall); surplus is booked as "in"

Write path:
- The movement insert and the stock change happen in one DB transaction.
- Stock is changed with UPDATE products SET quantity = quantity + :delta,
  never read-then-write, so concurrent movements cannot lose updates.
- Lock/serialization failures are retried (see concurrency.run_with_retry).
- Each movement takes the next value of the "inventory_movements" ledger
  sequence inside the same transaction; listings order by it.

Movements are append-only: no update or delete paths exist.
"""


def signed_delta(movement_type: str, quantity: int) -> int:
    if movement_type == MOVEMENT_IN:
        return quantity
    if movement_type in MOVEMENT_TYPES:
        return -quantity
    raise ValidationError(f"type must be one of: {', '.join(MOVEMENT_TYPES)}")


MOVEMENT_SEQUENCE = "inventory_movements"


def _next_sequence(name: str) -> int:
    """
    Allocate the next value of a named ledger sequence.

    Must be the first write of the caller's transaction: the counter row
    stays locked until commit, so values follow commit order, and the
    first-allocation race below can roll back without losing other work.
    """
    stmt = (
        update(LedgerSequence)
        .where(LedgerSequence.name == name)
        .values(next_value=LedgerSequence.next_value + 1)
        .execution_options(synchronize_session=False)
    )

    def _current() -> int:
        value = (
            db.session.query(LedgerSequence.next_value)
            .filter(LedgerSequence.name == name)
            .scalar()
        )
        return value - 1

    if db.session.execute(stmt).rowcount:
        return _current()

    # First allocation: create the counter row
    db.session.add(LedgerSequence(name=name, next_value=2))
    try:
        db.session.flush()
        return 1
    except IntegrityError:
        # Another writer created it first
        db.session.rollback()
        if not db.session.execute(stmt).rowcount:
            raise
        return _current()


def _require_product(product_id: str, *, lock: bool = False) -> Product:
    query = db.session.query(Product).filter(Product.id == product_id)
    if lock:
        query = lock_for_update(query).populate_existing()
    product = query.first()
    if product is None:
        raise NotFoundError("Product not found")
    return product


def record_movement(
    *,
    product_id: str,
    type: str,
    quantity: int,
    reason: str,
    notes: str | None = None,
    user_id: str | None = None,
) -> InventoryMovement:
    """
    Record one inventory movement and apply it to the product's stock.

    Raises:
        ValidationError: unknown type, non-positive quantity, or a result
            outside the integer column range
        NotFoundError: product (or given user) does not exist; nothing is written
    """
    enforce_rules_movement({"type": type, "quantity": quantity})
    delta = signed_delta(type, quantity)

    def _op():
        sequence = _next_sequence(MOVEMENT_SEQUENCE)
        product = _require_product(product_id, lock=True)
        if not INT_MIN <= product.quantity + delta <= INT_MAX:
            raise ValidationError("Movement would take stock out of range")
        if user_id is not None and db.session.get(User, user_id) is None:
            raise NotFoundError("User not found")

        movement = InventoryMovement(
            sequence=sequence,
            product_id=product_id,
            type=type,
            quantity=quantity,
            quantity_delta=delta,
            reason=reason,
            notes=notes,
            user_id=user_id,
        )
        db.session.add(movement)

        db.session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(
                quantity=Product.quantity + delta,
                version_id=Product.version_id + 1,
            )
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
        return movement

    try:
        movement = run_with_retry(_op)
    except (NotFoundError, ValidationError):
        db.session.rollback()
        raise

    product = movement.product
    current_app.logger.info(
        "Recorded %s movement of %d on product %s (now %d)",
        type, quantity, product.code, product.quantity,
    )
    if product.is_low_stock:
        current_app.logger.warning(
            "Product %s is low on stock: %d (min %d)",
            product.code, product.quantity, product.min_stock,
        )
    return movement


def list_low_stock() -> list[Product]:
    """Every product with quantity <= min_stock (inclusive)."""
    return (
        db.session.query(Product)
        .filter(Product.quantity <= Product.min_stock)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )


def list_movements(product_id: str | None = None) -> list[InventoryMovement]:
    """
    Movements in insertion order, optionally for a single product.

    Raises NotFoundError if product_id is given and does not exist.
    """
    q = db.session.query(InventoryMovement)
    if product_id is not None:
        _require_product(product_id)
        q = q.filter(InventoryMovement.product_id == product_id)
    return q.order_by(InventoryMovement.sequence.asc()).all()


def stock_status_filter(query, status: str):
    """Restrict a Product query to one derived stock level."""
    if status == STOCK_OUT:
        return query.filter(Product.quantity == 0)
    if status == STOCK_LOW:
        return query.filter(Product.quantity <= Product.min_stock)
    if status == STOCK_OK:
        return query.filter(Product.quantity > Product.min_stock)
    raise ValidationError(f"status must be one of: {STOCK_OK}, {STOCK_LOW}, {STOCK_OUT}")


def reconcile_product(product: Product) -> dict:
    total = (
        db.session.query(func.coalesce(func.sum(InventoryMovement.quantity_delta), 0))
        .filter(InventoryMovement.product_id == product.id)
        .scalar()
    )
    expected = product.initial_quantity + int(total or 0)
    return {
        "productId": product.id,
        "code": product.code,
        "quantity": product.quantity,
        "expectedQuantity": expected,
        "consistent": expected == product.quantity,
    }


def reconcile_all() -> list[dict]:
    """Ledger consistency report for every product (read-only)."""
    products = db.session.query(Product).order_by(Product.code.asc()).all()
    return [reconcile_product(p) for p in products]
