# Overview: Service-layer operations for shrinkage (damaged / stolen stock).

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..entities import SHRINKAGE_DAMAGED, SHRINKAGE_TYPES, DamageRecord
from ..state import LedgerState
from ..validation import ValidationError, normalize_number, optional_text, require_quantity
from devicepay.time_utils import utcnow
from .identifier_service import SHRINKAGE_PREFIX, new_reference


logger = logging.getLogger(__name__)

MSG_PRODUCT_NOT_FOUND = "Product not found"
MSG_BAD_QUANTITY = "Quantity must be greater than zero"
MSG_EXCEEDS_STOCK = "Cannot log more than available stock"


class ShrinkageError(Exception):
    """Raised when a shrinkage entry is rejected."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def record_shrinkage(
    state: LedgerState,
    product_id: str,
    quantity: Any,
    type: str = SHRINKAGE_DAMAGED,
    note: Any = None,
) -> DamageRecord:
    """
    Log damaged or stolen units and take them out of stock.

    Raises ShrinkageError with the specific reason; nothing changes on failure.
    """
    if type not in SHRINKAGE_TYPES:
        raise ShrinkageError(f"type must be one of {', '.join(SHRINKAGE_TYPES)}")

    with state.transaction():
        product = state.find_product(product_id) if product_id else None
        if product is None:
            raise ShrinkageError(MSG_PRODUCT_NOT_FOUND, details={"product_id": product_id})

        try:
            qty = require_quantity(quantity)
        except ValidationError:
            raise ShrinkageError(MSG_BAD_QUANTITY)

        if qty > product.stock_quantity:
            raise ShrinkageError(
                MSG_EXCEEDS_STOCK,
                details={"requested_quantity": qty, "on_hand": product.stock_quantity},
            )

        record = DamageRecord(
            id=new_reference(SHRINKAGE_PREFIX, {d.id for d in state.damages}),
            product_id=product.id,
            product_name=product.name,
            unit_price=product.unit_price,
            quantity=qty,
            type=type,
            note=optional_text(note),
            timestamp=utcnow(),
        )
        state.damages.insert(0, record)
        product.stock_quantity = max(0, product.stock_quantity - qty)
        state.mark_changed()

    logger.info("%s logged for %s: %d unit(s), %s", record.type, record.product_name, record.quantity, record.id)
    return record


def list_shrinkage(state: LedgerState, type: str | None = None) -> list[DamageRecord]:
    if type:
        return [d for d in state.damages if d.type == type]
    return list(state.damages)


def damage_loss(records: Iterable[DamageRecord]) -> int | float:
    return normalize_number(sum(record.loss for record in records))
