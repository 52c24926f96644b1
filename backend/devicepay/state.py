# Overview: Process-wide ledger state container; serializes commands and notifies observers of changes.

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from devicepay.entities import DamageRecord, Product, Sale


StateListener = Callable[["LedgerState"], None]


class LedgerState:
    """
    Catalog + ledger held in memory for the lifetime of the application session.

    Every engine operation receives the container explicitly and performs its
    mutation inside `transaction()`. Listeners run once, after the outermost
    transaction that called `mark_changed()` exits, so they never observe a
    partially applied command.
    """

    def __init__(
        self,
        products: list[Product] | None = None,
        sales: list[Sale] | None = None,
        damages: list[DamageRecord] | None = None,
    ):
        # Newest first in all three lists
        self.products: list[Product] = list(products or [])
        self.sales: list[Sale] = list(sales or [])
        self.damages: list[DamageRecord] = list(damages or [])

        self._lock = threading.RLock()
        self._depth = 0
        self._dirty = False
        self._listeners: list[StateListener] = []

    # -- observers ---------------------------------------------------------

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    @contextmanager
    def transaction(self) -> Iterator["LedgerState"]:
        with self._lock:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
                if self._depth == 0 and self._dirty:
                    self._dirty = False
                    self._notify()

    def mark_changed(self) -> None:
        with self._lock:
            if self._depth:
                self._dirty = True
                return
        self._notify()

    # -- lookups -----------------------------------------------------------

    def find_product(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def find_sale(self, sale_id: str) -> Sale | None:
        for sale in self.sales:
            if sale.id == sale_id:
                return sale
        return None

    # -- bulk --------------------------------------------------------------

    def replace(
        self,
        *,
        products: list[Product] | None = None,
        sales: list[Sale] | None = None,
        damages: list[DamageRecord] | None = None,
    ) -> None:
        """Swap in loaded collections without notifying listeners (hydration)."""
        with self._lock:
            if products is not None:
                self.products = list(products)
            if sales is not None:
                self.sales = list(sales)
            if damages is not None:
                self.damages = list(damages)

    def clear(self) -> None:
        with self.transaction():
            self.products = []
            self.sales = []
            self.damages = []
            self.mark_changed()

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "products": [p.to_dict() for p in self.products],
                "sales": [s.to_dict() for s in self.sales],
                "damages": [d.to_dict() for d in self.damages],
            }
