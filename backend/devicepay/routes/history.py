# Overview: Flask API routes for the sales history view; search, sort, corrections and CSV export.

# backend/devicepay/routes/history.py
"""
History routes.

The view state (typed search text, committed query, sort mode) lives on the
ledger. GET /api/history applies the committed query only; typing via
/search-input does not filter until /search commits it.

Edits and deletions never change stock (see history_service).
"""

from flask import Blueprint, Response, current_app, jsonify, request

from ..ledger import get_ledger
from ..services import export_service, history_service
from ..services.export_service import ExportError
from ..validation import ValidationError, json_object
from devicepay.time_utils import today_iso


history_bp = Blueprint("history", __name__, url_prefix="/api/history")


def _history_payload(ledger) -> dict:
    sales = ledger.history.apply(ledger.state.sales)
    return {
        "view": ledger.history.to_dict(),
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
        "total_count": len(ledger.state.sales),
    }



def _bad_request(ledger, error: Exception):
    ledger.reject(str(error))
    return jsonify({"error": str(error)}), 400


@history_bp.get("")
def list_history_route():
    return jsonify(_history_payload(get_ledger()))


@history_bp.put("/search-input")
def search_input_route():
    ledger = get_ledger()
    try:
        data = json_object(request.get_json(silent=True))
    except ValidationError as e:
        return _bad_request(ledger, e)
    ledger.history.set_search_input(str(data.get("text") or ""))
    return jsonify({"view": ledger.history.to_dict()})


@history_bp.post("/search")
def commit_search_route():
    """Commit the typed search text (or an explicit `query`) as the active filter."""
    ledger = get_ledger()
    try:
        data = json_object(request.get_json(silent=True))
    except ValidationError as e:
        return _bad_request(ledger, e)
    query = data.get("query")
    ledger.history.commit_search(None if query is None else str(query))
    return jsonify(_history_payload(ledger))


@history_bp.put("/sort")
def sort_route():
    ledger = get_ledger()
    try:
        data = json_object(request.get_json(silent=True))
        ledger.history.set_sort(str(data.get("sort") or ""))
    except ValidationError as e:
        return _bad_request(ledger, e)
    return jsonify(_history_payload(ledger))


@history_bp.patch("/<sale_id>")
def update_sale_route(sale_id: str):
    ledger = get_ledger()
    try:
        data = json_object(request.get_json(silent=True))
        sale = history_service.update_sale(ledger.state, sale_id, data)
    except ValidationError as e:
        return _bad_request(ledger, e)
    except Exception:
        current_app.logger.exception("Failed to update sale %s", sale_id)
        return jsonify({"error": "Internal server error"}), 500

    if sale is None:
        return jsonify({"ok": True, "changed": False}), 200

    ledger.notify(f"Transaction {sale.id} updated")
    return jsonify({"ok": True, "changed": True, "sale": sale.to_dict()}), 200


@history_bp.delete("/<sale_id>")
def delete_sale_route(sale_id: str):
    ledger = get_ledger()
    try:
        removed = history_service.delete_sale(ledger.state, sale_id)
    except Exception:
        current_app.logger.exception("Failed to delete sale %s", sale_id)
        return jsonify({"error": "Internal server error"}), 500

    if removed:
        ledger.notify(f"Transaction {sale_id} deleted")
    return jsonify({"ok": True, "changed": removed}), 200


@history_bp.get("/export")
def export_route():
    ledger = get_ledger()
    tz_name = current_app.config["DISPLAY_TIMEZONE"]
    try:
        csv_text = export_service.sales_csv(ledger.state.sales, tz_name)
        filename = export_service.export_filename(today_iso(tz_name))
    except ExportError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to export sales history")
        return jsonify({"error": "Internal server error"}), 500

    ledger.notify("CSV Export Started")
    return Response(
        csv_text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
