# Overview: Flask API routes for catalog operations; parses input and returns JSON responses.

# backend/devicepay/routes/products.py
"""
Catalog routes.

Adding a product always succeeds (inputs are coerced). Deleting an unknown
product is a no-op, not an error.
"""
from flask import Blueprint, current_app, jsonify, request

from ..entities import CATEGORIES
from ..ledger import get_ledger
from ..services import catalog_service
from ..validation import ValidationError, json_object

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products_route():
    """
    List the catalog, newest first.

    Query params:
    - category: str (optional) - filter by category
    """
    ledger = get_ledger()
    items = catalog_service.list_products(ledger.state, category=request.args.get("category"))
    return jsonify({
        "items": [p.to_dict() for p in items],
        "count": len(items),
        "categories": list(CATEGORIES),
    })


@products_bp.get("/low-stock")
def low_stock_route():
    threshold = request.args.get("threshold", type=int)
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    items = catalog_service.low_stock_products(get_ledger().state, threshold)
    return jsonify({"threshold": threshold, "items": [p.to_dict() for p in items]})


@products_bp.post("")
def create_product_route():
    ledger = get_ledger()
    try:
        payload = json_object(request.get_json(silent=True))
    except ValidationError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e)}), 400

    try:
        product = catalog_service.add_product(
            ledger.state,
            name=payload.get("name"),
            category=payload.get("category"),
            unit_price=payload.get("unit_price"),
            stock_quantity=payload.get("stock_quantity"),
        )
    except Exception:
        current_app.logger.exception("Failed to add product")
        return jsonify({"error": "Internal server error"}), 500

    ledger.notify(f"{product.name} added to inventory")
    return jsonify({"product": product.to_dict()}), 201


@products_bp.put("/<product_id>")
def update_product_route(product_id: str):
    ledger = get_ledger()

    try:
        payload = json_object(request.get_json(silent=True))
        product = catalog_service.update_product(ledger.state, product_id, payload)
    except ValidationError as e:
        ledger.reject(str(e))
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update product %s", product_id)
        return jsonify({"error": "Internal server error"}), 500

    if product is None:
        return jsonify({"error": "Product not found"}), 404

    ledger.notify(f"{product.name} updated")
    return jsonify({"product": product.to_dict()}), 200


@products_bp.delete("/<product_id>")
def delete_product_route(product_id: str):
    ledger = get_ledger()
    try:
        removed = catalog_service.remove_product(ledger.state, product_id)
    except Exception:
        current_app.logger.exception("Failed to remove product %s", product_id)
        return jsonify({"error": "Internal server error"}), 500

    if removed:
        ledger.notify("Product removed from inventory")
    return jsonify({"ok": True, "changed": removed}), 200
