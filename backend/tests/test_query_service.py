"""
History search/sort tests.

Verifies:
- filtering is case-insensitive on customer name and never mutates the input
- every sort mode, including stable ordering of ties
- typed search text has no effect until committed
"""

from datetime import datetime, timedelta

import pytest

from devicepay.services import query_service
from devicepay.services.query_service import HistoryQuery
from devicepay.validation import ValidationError


@pytest.fixture
def history(sale_factory):
    base = datetime(2024, 5, 1, 9, 0, 0)
    # newest first, as stored
    return [
        sale_factory("TXN-C", customer_name="Charles Obi", payment_amount=300, timestamp=base + timedelta(hours=2), receipt_received_at="2023-11-20"),
        sale_factory("TXN-B", customer_name="ada lovelace", payment_amount=100, timestamp=base + timedelta(hours=1)),
        sale_factory("TXN-A", customer_name="Adaeze", payment_amount=200, timestamp=base, receipt_received_at="2025-02-03"),
    ]


def ids(sales):
    return [s.id for s in sales]


class TestQuerySales:

    def test_case_insensitive_filter(self, history):
        assert ids(query_service.query_sales(history, "ADA")) == ["TXN-B", "TXN-A"]

    def test_empty_query_returns_all(self, history):
        assert len(query_service.query_sales(history, "")) == 3

    def test_results_are_subset_matching_query(self, history):
        result = query_service.query_sales(history, "obi", "amount_asc")
        assert all("obi" in s.customer_name.lower() for s in result)
        assert set(ids(result)) <= set(ids(history))

    def test_input_not_mutated(self, history):
        before = ids(history)
        query_service.query_sales(history, "", "date_asc")
        assert ids(history) == before

    @pytest.mark.parametrize(
        "mode, expected",
        [
            ("date_desc", ["TXN-C", "TXN-B", "TXN-A"]),
            ("date_asc", ["TXN-A", "TXN-B", "TXN-C"]),
            ("amount_desc", ["TXN-C", "TXN-A", "TXN-B"]),
            ("amount_asc", ["TXN-B", "TXN-A", "TXN-C"]),
            # month only: Nov (11) > Feb (2) > missing (0)
            ("receipt_desc", ["TXN-C", "TXN-A", "TXN-B"]),
            ("receipt_asc", ["TXN-B", "TXN-A", "TXN-C"]),
        ],
    )
    def test_sort_modes(self, history, mode, expected):
        assert ids(query_service.query_sales(history, "", mode)) == expected

    def test_ties_keep_history_order(self, sale_factory):
        ts = datetime(2024, 1, 1)
        sales = [
            sale_factory("TXN-1", payment_amount=50, timestamp=ts),
            sale_factory("TXN-2", payment_amount=50, timestamp=ts),
            sale_factory("TXN-3", payment_amount=50, timestamp=ts),
        ]
        assert ids(query_service.query_sales(sales, "", "amount_desc")) == ["TXN-1", "TXN-2", "TXN-3"]
        assert ids(query_service.query_sales(sales, "", "amount_asc")) == ["TXN-1", "TXN-2", "TXN-3"]

    def test_unknown_sort_rejected(self, history):
        with pytest.raises(ValidationError):
            query_service.query_sales(history, "", "name_asc")


def test_receipt_month(sale_factory):
    assert query_service.receipt_month(sale_factory("T", receipt_received_at="2020-09-30")) == 9
    assert query_service.receipt_month(sale_factory("T")) == 0


class TestHistoryQuery:

    def test_typing_does_not_filter_until_commit(self, history):
        view = HistoryQuery()

        view.set_search_input("charles")
        assert len(view.apply(history)) == 3

        view.commit_search()
        assert ids(view.apply(history)) == ["TXN-C"]

    def test_commit_with_explicit_text(self, history):
        view = HistoryQuery()
        assert view.commit_search("  ada ") == "ada"
        assert view.search_input == "  ada "
        assert ids(view.apply(history)) == ["TXN-B", "TXN-A"]

    def test_set_sort_validates(self):
        view = HistoryQuery()
        view.set_sort("amount_asc")
        assert view.to_dict() == {"search_input": "", "active_query": "", "sort": "amount_asc"}

        with pytest.raises(ValidationError):
            view.set_sort("bogus")
        assert view.sort_mode == "amount_asc"
