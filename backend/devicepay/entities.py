# Overview: In-memory ledger entities (catalog products, sales and shrinkage records).

"""
Ledger entities.

Snapshot fields: SaleItem.product_name / unit_price / category and
DamageRecord.product_name / unit_price are copied from the Product when the
record is created and are never re-derived from the live catalog, so history
stays accurate after a product is renamed, repriced or deleted.

References to products are by id only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from devicepay.time_utils import from_epoch_ms, parse_iso_datetime, to_utc_z, utcnow
from devicepay.validation import require_number, require_quantity


CATEGORY_SMARTPHONE = "Smartphone"
CATEGORY_LAPTOP = "Laptop"
CATEGORY_TABLET = "Tablet"
CATEGORY_WATCH = "Watch"
CATEGORY_ROUTER = "Router"
CATEGORY_ACCESSORY = "Accessory"
CATEGORY_OTHER = "Other"
CATEGORIES = (
    CATEGORY_SMARTPHONE,
    CATEGORY_LAPTOP,
    CATEGORY_TABLET,
    CATEGORY_WATCH,
    CATEGORY_ROUTER,
    CATEGORY_ACCESSORY,
    CATEGORY_OTHER,
)

SHRINKAGE_DAMAGED = "Damaged"
SHRINKAGE_STOLEN = "Stolen"
SHRINKAGE_TYPES = (SHRINKAGE_DAMAGED, SHRINKAGE_STOLEN)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_epoch_ms(value)
    if isinstance(value, str):
        parsed = parse_iso_datetime(value)
        if parsed is not None:
            return parsed
    raise ValueError(f"invalid timestamp: {value!r}")


@dataclass
class Product:
    id: str
    name: str
    category: str
    unit_price: int | float = 0
    stock_quantity: int = 0
    date_added: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit_price": self.unit_price,
            "stock_quantity": self.stock_quantity,
            "date_added": to_utc_z(self.date_added),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=data.get("category") or CATEGORY_OTHER,
            unit_price=require_number(data.get("unit_price", 0), "unit_price"),
            stock_quantity=require_quantity(data.get("stock_quantity", 0), "stock_quantity", allow_zero=True),
            date_added=_parse_timestamp(data["date_added"]),
        )


@dataclass
class SaleItem:
    product_id: str
    product_name: str
    unit_price: int | float
    quantity: int
    category: str | None = None

    @property
    def subtotal(self) -> int | float:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SaleItem":
        return cls(
            product_id=str(data["product_id"]),
            product_name=str(data["product_name"]),
            unit_price=require_number(data["unit_price"], "unit_price"),
            quantity=require_quantity(data["quantity"]),
            category=data.get("category"),
        )


@dataclass
class Sale:
    """
    A settled sale. id, items and timestamp never change after creation;
    customer_name, customer_phone, payment_amount and receipt_received_at
    may be corrected through the history editor.
    """
    id: str
    customer_name: str
    customer_phone: str
    items: list[SaleItem]
    total_price: int | float
    payment_amount: int | float
    timestamp: datetime
    receipt_received_at: str | None = None

    @property
    def balance_due(self) -> int | float:
        return self.total_price - self.payment_amount

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "items": [item.to_dict() for item in self.items],
            "total_price": self.total_price,
            "payment_amount": self.payment_amount,
            "timestamp": to_utc_z(self.timestamp),
            "receipt_received_at": self.receipt_received_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        items = [SaleItem.from_dict(item) for item in data["items"]]
        if not items:
            raise ValueError("sale has no items")
        return cls(
            id=str(data["id"]),
            customer_name=str(data.get("customer_name") or ""),
            customer_phone=str(data.get("customer_phone") or ""),
            items=items,
            total_price=require_number(data["total_price"], "total_price"),
            payment_amount=require_number(data["payment_amount"], "payment_amount"),
            timestamp=_parse_timestamp(data["timestamp"]),
            receipt_received_at=data.get("receipt_received_at") or None,
        )


@dataclass
class DamageRecord:
    id: str
    product_id: str
    product_name: str
    unit_price: int | float
    quantity: int
    type: str
    timestamp: datetime
    note: str | None = None

    @property
    def loss(self) -> int | float:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "type": self.type,
            "note": self.note,
            "timestamp": to_utc_z(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DamageRecord":
        record_type = data["type"]
        if record_type not in SHRINKAGE_TYPES:
            raise ValueError(f"invalid shrinkage type: {record_type!r}")
        return cls(
            id=str(data["id"]),
            product_id=str(data["product_id"]),
            product_name=str(data["product_name"]),
            unit_price=require_number(data["unit_price"], "unit_price"),
            quantity=require_quantity(data["quantity"]),
            type=record_type,
            timestamp=_parse_timestamp(data["timestamp"]),
            note=data.get("note") or None,
        )
