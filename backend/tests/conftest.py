"""
Pytest fixtures for DevicePay backend tests.

Provides an app on an in-memory snapshot store, a test client, a bare
LedgerState for pure engine tests, and small entity factories.
"""

from datetime import datetime

import pytest

from devicepay import create_app
from devicepay.entities import Sale, SaleItem
from devicepay.extensions import db
from devicepay.ledger import get_ledger
from devicepay.services import catalog_service
from devicepay.state import LedgerState


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'DISPLAY_TIMEZONE': 'UTC',
    'NOTIFICATION_TTL_SECONDS': 3,
}


@pytest.fixture(scope='function')
def app():
    """Create application for testing (fresh in-memory database per test)."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def ledger(app):
    return get_ledger()


@pytest.fixture(scope='function')
def state():
    """Bare ledger state with no persistence attached."""
    return LedgerState()


@pytest.fixture
def make_product(state):
    """Factory adding a product to the bare state."""
    def _make(name="Device", category="Smartphone", unit_price=100, stock_quantity=10):
        return catalog_service.add_product(state, name, category, unit_price, stock_quantity)
    return _make


def build_sale(
    sale_id,
    customer_name="Customer",
    payment_amount=100,
    timestamp=None,
    receipt_received_at=None,
    items=None,
):
    """Sale built directly (bypassing stock checks) for query/export tests."""
    items = items or [SaleItem(product_id="p-1", product_name="Phone", unit_price=payment_amount, quantity=1, category="Smartphone")]
    return Sale(
        id=sale_id,
        customer_name=customer_name,
        customer_phone="0800",
        items=items,
        total_price=sum(i.subtotal for i in items),
        payment_amount=payment_amount,
        timestamp=timestamp or datetime(2024, 1, 1, 12, 0, 0),
        receipt_received_at=receipt_received_at,
    )


@pytest.fixture
def sale_factory():
    return build_sale
