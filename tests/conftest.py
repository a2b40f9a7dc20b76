from decimal import Decimal
from itertools import count

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.orders.constants import ItemStatus, ItemType
from modules.orders.models import Order, OrderItem

_sequence = count(1)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return get_user_model().objects.create_user(
        username="operator", password="operator-pass"
    )


@pytest.fixture()
def staff_user():
    return get_user_model().objects.create_user(
        username="staff", password="staff-pass", is_staff=True
    )


@pytest.fixture()
def auth_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture()
def make_order():
    def _make(**kwargs):
        defaults = {
            "storefront_order_id": f"SF-{next(_sequence):05d}",
            "customer_name": "Jane Doe",
        }
        defaults.update(kwargs)
        return Order.objects.create(**defaults)

    return _make


@pytest.fixture()
def make_item(make_order):
    def _make(order=None, **kwargs):
        defaults = {
            "order": order or make_order(),
            "item_type": ItemType.CURRENCY_BUNDLE,
            "product_name": "Coins 1000",
            "status": ItemStatus.PROCESSING,
            "quantity_ordered": Decimal("1000"),
        }
        defaults.update(kwargs)
        return OrderItem.objects.create(**defaults)

    return _make
