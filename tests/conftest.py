from decimal import Decimal

import pytest

from django.core.cache import cache
from rest_framework.test import APIClient

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import (
    DeliveryDjangoRepository,
    OrderDjangoRepository,
)
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
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
def order_service():
    """OrderService wired to the Django repositories."""
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
        delivery_repository=DeliveryDjangoRepository(),
    )


@pytest.fixture()
def make_product():
    def _make(name="Sourdough Loaf", price="6.50", category="bread", quantity=5):
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            category=category,
            quantity=quantity,
        )

    return _make


@pytest.fixture()
def croissant(make_product):
    return make_product(name="Butter Croissant", price="2.90", category="pastry", quantity=5)


@pytest.fixture()
def baguette(make_product):
    return make_product(name="Baguette", price="3.20", category="bread", quantity=10)
