# Overview: Flask API routes for sale processing; parses input and returns JSON responses.

# backend/devicepay/routes/sales.py
"""Sales API routes"""

from flask import Blueprint, current_app, jsonify, request

from ..ledger import get_ledger
from ..services import sales_service
from ..services.sales_service import IncompleteCustomerError, SaleError
from ..validation import ValidationError, coerce_flag, json_object


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def process_sale_route():
    """
    Process a sale.

    Body:
    - customer_name: str (required)
    - customer_phone: str (optional; missing phone needs confirm_incomplete=true)
    - cart: {product_id: quantity} (required)
    - payment_amount: number (optional; defaults to the total)
    - receipt_received_at: YYYY-MM-DD (optional)
    - confirm_incomplete: bool (optional)
    """
    ledger = get_ledger()
    try:
        data = json_object(request.get_json(silent=True))
    except ValidationError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e)}), 400

    cart = data.get("cart") or {}
    if not isinstance(cart, dict):
        ledger.reject("cart must be an object of product_id: quantity")
        return jsonify({"error": "cart must be an object of product_id: quantity"}), 400

    try:
        sale = sales_service.process_sale(
            ledger.state,
            customer_name=data.get("customer_name"),
            customer_phone=data.get("customer_phone"),
            cart=cart,
            payment_amount=data.get("payment_amount"),
            receipt_received_at=data.get("receipt_received_at"),
            confirm_incomplete=coerce_flag(data.get("confirm_incomplete")),
        )
    except IncompleteCustomerError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e), "missing": e.missing, "confirmable": True}), 409
    except SaleError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to process sale")
        return jsonify({"error": "Internal server error"}), 500

    ledger.notify(f"Transaction {sale.id} completed")
    return jsonify({"sale": sale.to_dict()}), 201


@sales_bp.post("/quote")
def quote_route():
    """Total due for a cart at current prices (no state change)."""
    try:
        data = json_object(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    cart = data.get("cart") or {}
    if not isinstance(cart, dict):
        return jsonify({"error": "cart must be an object of product_id: quantity"}), 400
    try:
        total = sales_service.cart_total(get_ledger().state, cart)
    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    return jsonify({"total_price": total}), 200


@sales_bp.get("/<sale_id>")
def get_sale_route(sale_id: str):
    sale = get_ledger().state.find_sale(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"sale": sale.to_dict()}), 200
