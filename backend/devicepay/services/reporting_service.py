# Overview: Service-layer analytics derived from the catalog, sales and shrinkage records.

from __future__ import annotations

from ..entities import CATEGORY_OTHER
from ..state import LedgerState
from ..validation import normalize_number
from .shrinkage_service import damage_loss


RECENT_ACTIVITY_LIMIT = 5


def category_distribution(state: LedgerState) -> dict[str, int]:
    """Units sold per snapshotted item category, in first-seen order."""
    distribution: dict[str, int] = {}
    for sale in state.sales:
        for item in sale.items:
            category = item.category or CATEGORY_OTHER
            distribution[category] = distribution.get(category, 0) + item.quantity
    return distribution


def stock_value(state: LedgerState) -> int | float:
    return normalize_number(sum(p.unit_price * p.stock_quantity for p in state.products))


def compute_analytics(state: LedgerState, *, low_stock_threshold: int | None = None) -> dict:
    """
    Dashboard figures, recomputed from current state on every call.

    total_revenue is net of shrinkage loss and may be negative.
    """
    with state.transaction():
        loss = damage_loss(state.damages)
        collected = normalize_number(sum(sale.payment_amount for sale in state.sales))
        distribution = category_distribution(state)
        outstanding = normalize_number(
            sum(sale.balance_due for sale in state.sales if sale.balance_due > 0)
        )

        result = {
            "total_revenue": normalize_number(collected - loss),
            "gross_payments": collected,
            "damage_loss": loss,
            "stock_value": stock_value(state),
            "total_sales_count": len(state.sales),
            "category_distribution": distribution,
            "chart_data": [{"label": label, "value": value} for label, value in distribution.items()],
            "outstanding_balance": outstanding,
            "recent_activity": [sale.to_dict() for sale in state.sales[:RECENT_ACTIVITY_LIMIT]],
        }
        if low_stock_threshold is not None:
            result["low_stock_count"] = sum(
                1 for p in state.products if p.stock_quantity < low_stock_threshold
            )
    return result
