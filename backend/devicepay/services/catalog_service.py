# Overview: Service-layer operations for the device catalog; add, edit, remove and look up products.

"""
Catalog Store

Products are kept newest-first. Adding never fails: the form values are
coerced leniently. Removing a product leaves past sales and shrinkage
records untouched since they only hold the product id plus snapshots.
"""

from __future__ import annotations

import logging
from typing import Any

from ..entities import CATEGORIES, CATEGORY_OTHER, Product
from ..state import LedgerState
from ..validation import ValidationError, clean_text, coerce_number, require_number, require_quantity
from devicepay.time_utils import utcnow
from .identifier_service import new_product_id


logger = logging.getLogger(__name__)

PRODUCT_MUTABLE_FIELDS = {"name", "category", "unit_price", "stock_quantity"}
DEFAULT_PRODUCT_NAME = "Untitled"


def normalize_category(value: Any) -> str:
    category = clean_text(value)
    return category if category in CATEGORIES else CATEGORY_OTHER


def add_product(
    state: LedgerState,
    name: Any,
    category: Any = None,
    unit_price: Any = None,
    stock_quantity: Any = None,
) -> Product:
    product = Product(
        id=new_product_id(),
        name=clean_text(name) or DEFAULT_PRODUCT_NAME,
        category=normalize_category(category),
        unit_price=max(0, coerce_number(unit_price)),
        stock_quantity=max(0, int(coerce_number(stock_quantity))),
        date_added=utcnow(),
    )
    with state.transaction():
        state.products.insert(0, product)
        state.mark_changed()
    logger.info("Product %s (%s) added with stock %s", product.id, product.name, product.stock_quantity)
    return product


def remove_product(state: LedgerState, product_id: str) -> bool:
    with state.transaction():
        product = state.find_product(product_id)
        if product is None:
            return False
        state.products.remove(product)
        state.mark_changed()
    logger.info("Product %s (%s) removed", product.id, product.name)
    return True


def update_product(state: LedgerState, product_id: str, patch: dict) -> Product | None:
    """
    Explicit catalog edit. Unknown keys are ignored. Prices and stock are
    validated strictly here since this is a correction, not a form default.
    """
    changes: dict[str, Any] = {}
    for key, value in patch.items():
        if key not in PRODUCT_MUTABLE_FIELDS:
            logger.warning("Ignoring non-editable product field %r", key)
            continue
        if key == "name":
            name = clean_text(value)
            if not name:
                raise ValidationError("name cannot be empty")
            changes[key] = name
        elif key == "category":
            if clean_text(value) not in CATEGORIES:
                raise ValidationError(f"category must be one of {', '.join(CATEGORIES)}")
            changes[key] = clean_text(value)
        elif key == "unit_price":
            changes[key] = require_number(value, "unit_price")
        elif key == "stock_quantity":
            changes[key] = require_quantity(value, "stock_quantity", allow_zero=True)

    with state.transaction():
        product = state.find_product(product_id)
        if product is None:
            return None
        if changes:
            for key, value in changes.items():
                setattr(product, key, value)
            state.mark_changed()
    return product


def get_product(state: LedgerState, product_id: str) -> Product | None:
    return state.find_product(product_id)


def list_products(state: LedgerState, category: str | None = None) -> list[Product]:
    if category:
        return [p for p in state.products if p.category == category]
    return list(state.products)


def low_stock_products(state: LedgerState, threshold: int) -> list[Product]:
    """Products whose stock is below threshold (the inventory view flags these)."""
    return [p for p in state.products if p.stock_quantity < threshold]
