# Overview: Service-layer CSV rendering of the sales history.

from __future__ import annotations

import csv
import io
from typing import Sequence

from ..entities import Sale
from devicepay.time_utils import format_calendar_date


EXPORT_HEADERS = ["ID", "Date", "Customer", "Phone", "Items", "Amount"]
MSG_NOTHING_TO_EXPORT = "No records to export"


class ExportError(Exception):
    """Raised when an export cannot be produced."""


def describe_items(sale: Sale) -> str:
    return "; ".join(f"{item.quantity}x {item.product_name}" for item in sale.items)


def sale_row(sale: Sale, tz_name: str = "UTC") -> list[str]:
    return [
        sale.id,
        format_calendar_date(sale.timestamp, tz_name),
        sale.customer_name,
        sale.customer_phone,
        describe_items(sale),
        str(sale.payment_amount),
    ]


def sales_csv(sales: Sequence[Sale], tz_name: str = "UTC") -> str:
    """
    Full history as CSV: every field quoted, embedded quotes doubled, rows
    separated by '\\n'. Raises ExportError for an empty history.
    """
    if not sales:
        raise ExportError(MSG_NOTHING_TO_EXPORT)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for sale in sales:
        writer.writerow(sale_row(sale, tz_name))
    return buffer.getvalue().rstrip("\n")


def export_filename(today: str) -> str:
    return f"Sales_Report_{today}.csv"
