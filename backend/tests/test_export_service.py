"""CSV export tests."""

import csv
import io
from datetime import datetime

import pytest

from devicepay.entities import SaleItem
from devicepay.services import export_service
from devicepay.services.export_service import EXPORT_HEADERS, ExportError


def parse(text):
    return list(csv.reader(io.StringIO(text)))


def test_empty_history_rejected():
    with pytest.raises(ExportError, match="No records to export"):
        export_service.sales_csv([])


def test_header_and_rows(sale_factory):
    sale = sale_factory(
        "TXN-AAA1111",
        customer_name="Ann",
        payment_amount=1500,
        timestamp=datetime(2024, 3, 9, 10, 0),
        items=[
            SaleItem("p1", "iPhone 15", 1000, 1),
            SaleItem("p2", "USB-C Cable", 250, 2),
        ],
    )

    text = export_service.sales_csv([sale])
    rows = parse(text)

    assert rows[0] == EXPORT_HEADERS
    assert rows[1] == ["TXN-AAA1111", "3/9/2024", "Ann", "0800", "1x iPhone 15; 2x USB-C Cable", "1500"]
    assert text.startswith('"ID","Date"')
    assert not text.endswith("\n")


def test_commas_and_quotes_survive(sale_factory):
    sale = sale_factory(
        "TXN-Q",
        customer_name='Smith, "Bob"',
        items=[SaleItem("p1", 'Case, 6" "Slim"', 10, 1)],
    )

    rows = parse(export_service.sales_csv([sale]))

    assert rows[1][2] == 'Smith, "Bob"'
    assert rows[1][4] == '1x Case, 6" "Slim"'


def test_rows_follow_history_order(sale_factory):
    sales = [sale_factory("TXN-2"), sale_factory("TXN-1")]
    assert [r[0] for r in parse(export_service.sales_csv(sales))[1:]] == ["TXN-2", "TXN-1"]


def test_date_rendered_in_display_timezone(sale_factory):
    sale = sale_factory("TXN-TZ", timestamp=datetime(2024, 12, 31, 23, 30))

    assert parse(export_service.sales_csv([sale], "UTC"))[1][1] == "12/31/2024"
    assert parse(export_service.sales_csv([sale], "Africa/Lagos"))[1][1] == "1/1/2025"


def test_fractional_amount(sale_factory):
    sale = sale_factory("TXN-F", payment_amount=99.5)
    assert parse(export_service.sales_csv([sale]))[1][5] == "99.5"


def test_export_filename():
    assert export_service.export_filename("2024-03-09") == "Sales_Report_2024-03-09.csv"
