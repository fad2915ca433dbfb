# Overview: Dashboard aggregates over rentals and inventory.

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func

from app.extensions import db
from app.models import Product, Rental
from app.models.common import money_str


def dashboard_stats() -> dict:
    """
    Headline numbers for the dashboard.

    monthlyRevenue is the summed total_amount of active rentals (what is
    currently being paid to suppliers); productsInStock is total units on hand.
    """
    active_count, active_total = (
        db.session.query(
            func.count(Rental.id),
            func.coalesce(func.sum(Rental.total_amount), 0),
        )
        .filter(Rental.status == "active")
        .one()
    )
    units = db.session.query(func.coalesce(func.sum(Product.quantity), 0)).scalar()
    low_stock = (
        db.session.query(func.count(Product.id))
        .filter(Product.quantity <= Product.min_stock)
        .scalar()
    )

    return {
        "activeRentals": int(active_count or 0),
        "monthlyRevenue": float(money_str(Decimal(str(active_total or 0)))),
        "productsInStock": int(units or 0),
        "lowStockItems": int(low_stock or 0),
    }
