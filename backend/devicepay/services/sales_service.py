# Overview: Service-layer operations for sales; validates a cart and applies it to the catalog atomically.

"""
Ledger Engine - sale processing

A sale is validated in full before anything changes: every cart line must
reference an existing product with enough stock. If any line fails nothing
is applied. On success the sale record is inserted and every line's stock is
decremented inside the same state transaction, so a sale never exists
without its stock deduction and vice versa.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..entities import Sale, SaleItem
from ..state import LedgerState
from ..validation import (
    ValidationError,
    clean_text,
    normalize_number,
    normalize_receipt_date,
    require_number,
    require_quantity,
)
from devicepay.time_utils import utcnow
from .identifier_service import SALE_PREFIX, new_reference


logger = logging.getLogger(__name__)

MSG_INSUFFICIENT_STOCK = "Insufficient stock for one or more items"
MSG_EMPTY_CART = "Select at least one item"
MSG_MISSING_CUSTOMER = "Provide customer name and select items"
MSG_INVALID_PAYMENT = "Enter a valid amount paid"
MSG_OVERPAYMENT = "Amount paid cannot be more than total due"
MSG_INCOMPLETE_DETAILS = "Customer details incomplete"


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class IncompleteCustomerError(SaleError):
    """Optional customer fields are missing; the caller may confirm and resubmit."""
    def __init__(self, missing: list[str]):
        super().__init__(MSG_INCOMPLETE_DETAILS, details={"missing": missing})
        self.missing = missing


def _normalize_cart(cart: Mapping[str, Any]) -> dict[str, int]:
    lines: dict[str, int] = {}
    for product_id, quantity in cart.items():
        try:
            qty = require_quantity(quantity, f"quantity for {product_id}", allow_zero=True)
        except ValidationError as e:
            raise SaleError(str(e), details={"product_id": product_id})
        if qty:
            lines[str(product_id)] = lines.get(str(product_id), 0) + qty
    return lines


def _validate_on_hand(state: LedgerState, lines: dict[str, int]) -> None:
    insufficient = []
    for product_id, qty in lines.items():
        product = state.find_product(product_id)
        on_hand = product.stock_quantity if product else 0
        if product is None or on_hand < qty:
            insufficient.append({
                "product_id": product_id,
                "requested_quantity": qty,
                "on_hand": on_hand,
                "missing": product is None,
            })

    if insufficient:
        raise SaleError(MSG_INSUFFICIENT_STOCK, details={"items": insufficient})


def cart_total(state: LedgerState, cart: Mapping[str, Any]) -> int | float:
    """Total due for a cart at current catalog prices; unknown products count as 0."""
    total = 0
    for product_id, qty in _normalize_cart(cart).items():
        product = state.find_product(product_id)
        if product is not None:
            total += product.unit_price * qty
    return normalize_number(total)


def process_sale(
    state: LedgerState,
    customer_name: Any,
    customer_phone: Any,
    cart: Mapping[str, Any],
    payment_amount: Any = None,
    receipt_received_at: Any = None,
    confirm_incomplete: bool = False,
) -> Sale:
    """
    Validate and record a sale.

    payment_amount=None records the sale as fully paid. A tendered amount must
    be > 0 and not exceed the total (partial / installment payment).

    Raises SaleError (state unchanged) on any rejection.
    """
    name = clean_text(customer_name)
    phone = clean_text(customer_phone)
    try:
        receipt_date = normalize_receipt_date(receipt_received_at)
    except ValidationError as e:
        raise SaleError(str(e))

    with state.transaction():
        lines = _normalize_cart(cart)
        _validate_on_hand(state, lines)

        items = []
        for product_id, qty in lines.items():
            product = state.find_product(product_id)
            items.append(SaleItem(
                product_id=product.id,
                product_name=product.name,
                unit_price=product.unit_price,
                quantity=qty,
                category=product.category,
            ))
        total = normalize_number(sum(item.subtotal for item in items))

        if not items or total == 0:
            raise SaleError(MSG_EMPTY_CART if name else MSG_MISSING_CUSTOMER)
        if not name:
            raise SaleError(MSG_MISSING_CUSTOMER)

        if payment_amount is None:
            payment = total
        else:
            try:
                payment = require_number(payment_amount, "payment_amount", allow_equal=False)
            except ValidationError:
                raise SaleError(MSG_INVALID_PAYMENT)
            if payment > total:
                raise SaleError(MSG_OVERPAYMENT, details={"total_price": total, "payment_amount": payment})

        if not phone and not confirm_incomplete:
            raise IncompleteCustomerError(["Phone number"])

        sale = Sale(
            id=new_reference(SALE_PREFIX, {s.id for s in state.sales}),
            customer_name=name,
            customer_phone=phone,
            items=items,
            total_price=total,
            payment_amount=payment,
            timestamp=utcnow(),
            receipt_received_at=receipt_date,
        )

        state.sales.insert(0, sale)
        for item in items:
            product = state.find_product(item.product_id)
            product.stock_quantity = max(0, product.stock_quantity - item.quantity)
        state.mark_changed()

    logger.info("Sale %s recorded: total=%s paid=%s lines=%d", sale.id, sale.total_price, sale.payment_amount, len(items))
    return sale
