# Overview: Service-layer search and sort over the sales history for presentation.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from ..entities import Sale
from ..validation import ValidationError


SORT_DATE_DESC = "date_desc"
SORT_DATE_ASC = "date_asc"
SORT_AMOUNT_DESC = "amount_desc"
SORT_AMOUNT_ASC = "amount_asc"
SORT_RECEIPT_DESC = "receipt_desc"
SORT_RECEIPT_ASC = "receipt_asc"

DEFAULT_SORT = SORT_DATE_DESC


def receipt_month(sale: Sale) -> int:
    """Month (1-12) of receipt_received_at; 0 when absent or unparseable. Year and day are ignored."""
    month = (sale.receipt_received_at or "")[5:7]
    return int(month) if month.isdigit() else 0


# mode -> (key, descending)
SORT_MODES: dict[str, tuple[Callable[[Sale], object], bool]] = {
    SORT_DATE_DESC: (lambda s: s.timestamp, True),
    SORT_DATE_ASC: (lambda s: s.timestamp, False),
    SORT_AMOUNT_DESC: (lambda s: s.payment_amount, True),
    SORT_AMOUNT_ASC: (lambda s: s.payment_amount, False),
    SORT_RECEIPT_DESC: (receipt_month, True),
    SORT_RECEIPT_ASC: (receipt_month, False),
}


def validate_sort_mode(sort_mode: str) -> str:
    if sort_mode not in SORT_MODES:
        raise ValidationError(f"sort must be one of {', '.join(SORT_MODES)}")
    return sort_mode


def matches_customer(sale: Sale, query: str) -> bool:
    if not query:
        return True
    return query.lower() in sale.customer_name.lower()


def query_sales(sales: Iterable[Sale], query: str = "", sort_mode: str = DEFAULT_SORT) -> list[Sale]:
    """
    Filter by customer name, then sort. Returns a new list; `sales` is not
    mutated. Sorting is stable, so ties keep their history order.
    """
    key, descending = SORT_MODES[validate_sort_mode(sort_mode)]
    filtered = [sale for sale in sales if matches_customer(sale, query)]
    # sorted(reverse=True) keeps equal elements in their original order
    return sorted(filtered, key=key, reverse=descending)


@dataclass
class HistoryQuery:
    """
    History view state. Typing updates `search_input` only; the filter is the
    `active_query` set by an explicit search commit.
    """
    search_input: str = ""
    active_query: str = ""
    sort_mode: str = DEFAULT_SORT

    def set_search_input(self, text: str) -> None:
        self.search_input = text or ""

    def commit_search(self, text: str | None = None) -> str:
        if text is not None:
            self.search_input = text
        self.active_query = self.search_input.strip()
        return self.active_query

    def set_sort(self, sort_mode: str) -> None:
        self.sort_mode = validate_sort_mode(sort_mode)

    def apply(self, sales: Iterable[Sale]) -> list[Sale]:
        return query_sales(sales, self.active_query, self.sort_mode)

    def to_dict(self) -> dict:
        return {
            "search_input": self.search_input,
            "active_query": self.active_query,
            "sort": self.sort_mode,
        }
