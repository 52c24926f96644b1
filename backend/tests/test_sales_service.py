"""
Sale processing tests.

Verifies:
- all-or-nothing validation (no partial stock deduction)
- totals, payment handling and snapshots on success
- stock never goes negative across a sequence of sales
"""

import random

import pytest

from devicepay.services import catalog_service, sales_service
from devicepay.services.sales_service import IncompleteCustomerError, SaleError


# =============================================================================
# SUCCESSFUL SALES
# =============================================================================


class TestProcessSale:

    def test_deducts_stock_and_records_totals(self, state, make_product):
        a = make_product(name="A", unit_price=500, stock_quantity=5)
        b = make_product(name="B", unit_price=1000, stock_quantity=5)

        sale = sales_service.process_sale(state, "Ann", "08011112222", {a.id: 2, b.id: 1})

        assert a.stock_quantity == 3
        assert b.stock_quantity == 4
        assert sale.total_price == 2000
        assert sale.payment_amount == 2000
        assert state.sales[0] is sale

    def test_transaction_id_format(self, state, make_product):
        product = make_product()
        sale = sales_service.process_sale(state, "Ann", "0801", {product.id: 1})

        assert sale.id.startswith("TXN-")
        assert len(sale.id) == len("TXN-") + 7
        assert sale.id[4:].isalnum() and sale.id[4:].upper() == sale.id[4:]

    def test_items_snapshot_product_at_sale_time(self, state, make_product):
        product = make_product(name="Galaxy", category="Smartphone", unit_price=300, stock_quantity=5)
        sale = sales_service.process_sale(state, "Ann", "0801", {product.id: 2})

        catalog_service.update_product(state, product.id, {"name": "Galaxy Renamed", "unit_price": 999, "category": "Tablet"})

        item = sale.items[0]
        assert item.product_name == "Galaxy"
        assert item.unit_price == 300
        assert item.category == "Smartphone"
        assert item.quantity == 2

    def test_partial_payment_recorded(self, state, make_product):
        product = make_product(unit_price=1000, stock_quantity=2)

        sale = sales_service.process_sale(state, "Ann", "0801", {product.id: 2}, payment_amount="1500")

        assert sale.total_price == 2000
        assert sale.payment_amount == 1500
        assert sale.balance_due == 500

    def test_zero_quantity_lines_are_dropped(self, state, make_product):
        a = make_product(name="A", stock_quantity=5)
        b = make_product(name="B", stock_quantity=5)

        sale = sales_service.process_sale(state, "Ann", "0801", {a.id: 1, b.id: 0})

        assert [i.product_id for i in sale.items] == [a.id]
        assert b.stock_quantity == 5

    def test_receipt_date_is_stored(self, state, make_product):
        product = make_product()
        sale = sales_service.process_sale(
            state, "Ann", "0801", {product.id: 1}, receipt_received_at="2024-03-09"
        )
        assert sale.receipt_received_at == "2024-03-09"

    def test_missing_phone_can_be_confirmed(self, state, make_product):
        product = make_product(stock_quantity=3)

        with pytest.raises(IncompleteCustomerError) as exc:
            sales_service.process_sale(state, "Ann", "", {product.id: 1})
        assert exc.value.missing == ["Phone number"]
        assert state.sales == []
        assert product.stock_quantity == 3

        sale = sales_service.process_sale(state, "Ann", "", {product.id: 1}, confirm_incomplete=True)
        assert sale.customer_phone == ""
        assert product.stock_quantity == 2

    def test_listeners_see_sale_and_deduction_together(self, state, make_product):
        product = make_product(stock_quantity=4)
        seen = []
        state.subscribe(lambda s: seen.append((len(s.sales), s.find_product(product.id).stock_quantity)))

        sales_service.process_sale(state, "Ann", "0801", {product.id: 3})

        assert seen == [(1, 1)]


# =============================================================================
# REJECTIONS
# =============================================================================


class TestRejections:

    def test_any_insufficient_line_rejects_whole_sale(self, state, make_product):
        a = make_product(name="A", stock_quantity=2)
        b = make_product(name="B", stock_quantity=5)

        with pytest.raises(SaleError) as exc:
            sales_service.process_sale(state, "Ann", "0801", {a.id: 3, b.id: 1})

        assert str(exc.value) == "Insufficient stock for one or more items"
        assert exc.value.details["items"][0]["product_id"] == a.id
        assert a.stock_quantity == 2
        assert b.stock_quantity == 5
        assert state.sales == []

    def test_unknown_product_rejected(self, state, make_product):
        product = make_product(stock_quantity=5)

        with pytest.raises(SaleError):
            sales_service.process_sale(state, "Ann", "0801", {product.id: 1, "ghost": 1})

        assert product.stock_quantity == 5

    def test_empty_cart_rejected(self, state):
        with pytest.raises(SaleError, match="Select at least one item"):
            sales_service.process_sale(state, "Ann", "0801", {})

    def test_missing_customer_name_rejected(self, state, make_product):
        product = make_product()
        with pytest.raises(SaleError, match="Provide customer name"):
            sales_service.process_sale(state, "   ", "0801", {product.id: 1})
        assert state.sales == []

    @pytest.mark.parametrize("amount", [0, -5, "abc", ""])
    def test_invalid_payment_rejected(self, state, make_product, amount):
        product = make_product(unit_price=100, stock_quantity=2)
        with pytest.raises(SaleError, match="Enter a valid amount paid"):
            sales_service.process_sale(state, "Ann", "0801", {product.id: 1}, payment_amount=amount)
        assert product.stock_quantity == 2

    def test_payment_above_total_rejected(self, state, make_product):
        product = make_product(unit_price=100, stock_quantity=2)
        with pytest.raises(SaleError, match="cannot be more than total due"):
            sales_service.process_sale(state, "Ann", "0801", {product.id: 1}, payment_amount=101)

    @pytest.mark.parametrize("quantity", [-1, 1.5, "two"])
    def test_invalid_quantity_rejected(self, state, make_product, quantity):
        product = make_product(stock_quantity=5)
        with pytest.raises(SaleError):
            sales_service.process_sale(state, "Ann", "0801", {product.id: quantity})
        assert product.stock_quantity == 5

    def test_invalid_receipt_date_rejected(self, state, make_product):
        product = make_product()
        with pytest.raises(SaleError):
            sales_service.process_sale(state, "Ann", "0801", {product.id: 1}, receipt_received_at="09/03/2024")


def test_stock_never_negative_over_random_sales(state, make_product):
    rng = random.Random(1234)
    products = [make_product(name=f"P{i}", unit_price=10 + i, stock_quantity=rng.randint(0, 6)) for i in range(4)]

    for _ in range(200):
        cart = {p.id: rng.randint(0, 3) for p in rng.sample(products, rng.randint(1, 3))}
        try:
            sales_service.process_sale(state, "Buyer", "0800", cart)
        except SaleError:
            pass
        assert all(p.stock_quantity >= 0 for p in products)

    sold = {p.id: 0 for p in products}
    for sale in state.sales:
        for item in sale.items:
            sold[item.product_id] += item.quantity
    assert all(sold[p.id] + p.stock_quantity <= 6 for p in products)


def test_cart_total(state, make_product):
    a = make_product(unit_price=250)
    assert sales_service.cart_total(state, {a.id: 2, "ghost": 3}) == 500
