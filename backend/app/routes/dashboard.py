# backend/app/routes/dashboard.py
from flask import Blueprint, current_app

from ..services.reporting_service import dashboard_stats

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/stats")
def dashboard_stats_route():
    """Active rentals, rental spend, units in stock and low-stock count."""
    try:
        return dashboard_stats(), 200
    except Exception:
        current_app.logger.exception("Failed to fetch dashboard stats")
        return {"error": "Failed to fetch dashboard stats"}, 500
