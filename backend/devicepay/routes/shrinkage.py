# Overview: Flask API routes for logging damaged or stolen stock.

from flask import Blueprint, current_app, jsonify, request

from ..entities import SHRINKAGE_DAMAGED
from ..ledger import get_ledger
from ..services import shrinkage_service
from ..services.shrinkage_service import ShrinkageError
from ..validation import ValidationError, json_object


shrinkage_bp = Blueprint("shrinkage", __name__, url_prefix="/api/shrinkage")


@shrinkage_bp.get("")
def list_shrinkage_route():
    records = shrinkage_service.list_shrinkage(get_ledger().state, type=request.args.get("type"))
    return jsonify({
        "items": [r.to_dict() for r in records],
        "count": len(records),
        "loss": shrinkage_service.damage_loss(records),
    })


@shrinkage_bp.post("")
def log_shrinkage_route():
    ledger = get_ledger()
    try:
        data = json_object(request.get_json(silent=True))
    except ValidationError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e)}), 400

    try:
        record = shrinkage_service.record_shrinkage(
            ledger.state,
            product_id=data.get("product_id"),
            quantity=data.get("quantity"),
            type=data.get("type") or SHRINKAGE_DAMAGED,
            note=data.get("note"),
        )
    except ShrinkageError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to log shrinkage")
        return jsonify({"error": "Internal server error"}), 500

    ledger.notify(f"{record.type} logged for {record.product_name}")
    return jsonify({"record": record.to_dict()}), 201
