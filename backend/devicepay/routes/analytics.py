# Overview: Flask API routes for dashboard analytics.

from flask import Blueprint, current_app, jsonify

from ..ledger import get_ledger
from ..services import reporting_service


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.get("")
def analytics_route():
    result = reporting_service.compute_analytics(
        get_ledger().state,
        low_stock_threshold=current_app.config["LOW_STOCK_THRESHOLD"],
    )
    return jsonify(result)
