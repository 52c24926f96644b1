# Overview: Service-layer operations for correcting and deleting recorded sales.

"""
History Editor

Corrections to settled sales. Only customer identity, payment amount and the
receipt collection date can change; items, id and timestamp are fixed.

Neither editing nor deleting a sale touches product stock. Deleting a sale
therefore does not restock its items, and nothing checks that recorded
deductions plus current stock add up to an original baseline. This is a
known reconciliation gap.
"""

from __future__ import annotations

import logging
from typing import Any

from ..entities import Sale
from ..state import LedgerState
from ..validation import ValidationError, clean_text, normalize_receipt_date, require_number


logger = logging.getLogger(__name__)

SALE_EDITABLE_FIELDS = {"customer_name", "customer_phone", "payment_amount", "receipt_received_at"}
MSG_INVALID_AMOUNT = "Enter a valid amount"


def _clean_patch(fields: dict) -> dict[str, Any]:
    patch: dict[str, Any] = {}
    for key, value in fields.items():
        if key not in SALE_EDITABLE_FIELDS:
            logger.warning("Ignoring non-editable sale field %r", key)
            continue
        if key == "payment_amount":
            try:
                patch[key] = require_number(value, "payment_amount", allow_equal=False)
            except ValidationError:
                raise ValidationError(MSG_INVALID_AMOUNT)
        elif key == "receipt_received_at":
            patch[key] = normalize_receipt_date(value)
        else:
            patch[key] = clean_text(value)
    return patch


def update_sale(state: LedgerState, sale_id: str, fields: dict) -> Sale | None:
    """
    Shallow-merge editable fields onto a sale. Returns None if the id is unknown.

    Raises ValidationError (nothing applied) for an invalid payment amount or
    receipt date.
    """
    patch = _clean_patch(fields)
    with state.transaction():
        sale = state.find_sale(sale_id)
        if sale is None:
            return None
        if patch:
            for key, value in patch.items():
                setattr(sale, key, value)
            state.mark_changed()
    logger.info("Sale %s updated: %s", sale_id, ", ".join(sorted(patch)) or "no changes")
    return sale


def delete_sale(state: LedgerState, sale_id: str) -> bool:
    with state.transaction():
        sale = state.find_sale(sale_id)
        if sale is None:
            return False
        state.sales.remove(sale)
        state.mark_changed()
    logger.info("Sale %s deleted (stock not restored)", sale_id)
    return True
