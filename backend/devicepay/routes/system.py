# backend/devicepay/routes/system.py
"""
System health endpoint.

Reports snapshot store connectivity and whether the ledger has been hydrated.
"""

import time
from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..ledger import get_ledger
from ..models import StateSnapshot
from devicepay.time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__, url_prefix="/api/system")


def check_database_health() -> dict:
    """
    Check snapshot store connectivity.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        snapshot = db.session.get(StateSnapshot, current_app.config["SNAPSHOT_KEY"])
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"snapshot": snapshot.to_dict() if snapshot else None},
        }
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Database health check failed")
        return {"status": "unhealthy", "error": str(e)}


@system_bp.get("/health")
def health():
    ledger = get_ledger()
    database = check_database_health()
    status = "healthy" if database["status"] == "healthy" and ledger.hydrated else "degraded"
    return {
        "status": status,
        "timestamp": to_utc_z(utcnow()),
        "checks": {
            "database": database,
            "ledger": {
                "hydrated": ledger.hydrated,
                "products": len(ledger.state.products),
                "sales": len(ledger.state.sales),
                "damages": len(ledger.state.damages),
            },
        },
    }, 200 if status == "healthy" else 503
