"""Integration tests for ``POST /orders`` (order placement).

Covers:
- Success 200 with ``{"orderId": ...}`` and the resulting rows.
- 400 ``Invalid order`` for malformed payloads, with zero writes.
- 400 ``Insufficient stock for product <id>`` with full rollback.
- 500 ``{"error": <message>}`` for store failures.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from django.db import OperationalError

from modules.customers.models import Customer
from modules.orders.models import Delivery, Order, OrderItem
from modules.orders.repositories.django_repository import DeliveryDjangoRepository

pytestmark = pytest.mark.integration

URL = "/orders"


def _body(items, email="a@x.com", name="Alice", **customer):
    return {
        "customer": {"name": name, "email": email, **customer},
        "items": [{"product_id": p, "quantity": q} for p, q in items],
    }


def _assert_no_writes():
    assert Customer.objects.count() == 0
    assert Order.objects.count() == 0
    assert OrderItem.objects.count() == 0
    assert Delivery.objects.count() == 0


class TestPlaceOrderSuccess:
    def test_alice_scenario(self, api_client, croissant):
        response = api_client.post(URL, _body([(croissant.id, 2)]), format="json")

        assert response.status_code == 200
        order_id = response.json()["orderId"]
        assert response.json() == {"orderId": order_id}

        croissant.refresh_from_db()
        assert croissant.quantity == 3
        assert list(
            OrderItem.objects.values_list("order_id", "product_id", "quantity")
        ) == [(order_id, croissant.id, 2)]
        assert list(Delivery.objects.values_list("order_id", "status", "location")) == [
            (order_id, "pending", None)
        ]
        order = Order.objects.get(id=order_id)
        assert order.status == "pending"
        assert order.customer.email == "a@x.com"

    def test_same_email_reuses_customer(self, api_client, baguette):
        first = api_client.post(URL, _body([(baguette.id, 1)]), format="json")
        second = api_client.post(
            URL, _body([(baguette.id, 1)], email="A@x.com"), format="json"
        )

        assert first.status_code == second.status_code == 200
        assert first.json()["orderId"] != second.json()["orderId"]
        assert Customer.objects.count() == 1
        assert Order.objects.filter(customer__email="a@x.com").count() == 2

    def test_phone_is_stored(self, api_client, baguette):
        api_client.post(
            URL, _body([(baguette.id, 1)], phone="555-0101"), format="json"
        )
        assert Customer.objects.get().phone == "555-0101"


class TestPlaceOrderInvalid:
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"items": [{"product_id": 1, "quantity": 1}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": []},
            {"customer": {"name": "Alice", "email": ""}, "items": [{"product_id": 1, "quantity": 1}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": [{"product_id": 1, "quantity": 0}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": [{"quantity": 1}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": [{"product_id": True, "quantity": True}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": [{"product_id": 10**20, "quantity": 1}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": [{"product_id": 1, "quantity": 10**20}]},
            {"customer": {"name": "Alice", "email": "a@x.com", "phone": "5" * 21}, "items": [{"product_id": 1, "quantity": 1}]},
            {"customer": {"name": "A" * 256, "email": "a@x.com"}, "items": [{"product_id": 1, "quantity": 1}]},
        ],
    )
    def test_invalid_payload(self, api_client, body):
        response = api_client.post(URL, body, format="json")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid order"}
        _assert_no_writes()

    def test_malformed_json(self, api_client):
        response = api_client.post(URL, data="{", content_type="application/json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid order"}

    def test_json_array_body(self, api_client):
        response = api_client.post(URL, data="[]", content_type="application/json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid order"}

    def test_invalid_order_performs_no_queries(
        self, api_client, django_assert_num_queries
    ):
        with django_assert_num_queries(0):
            response = api_client.post(
                URL,
                {"customer": {"name": "Alice", "email": "a@x.com"}, "items": []},
                format="json",
            )
        assert response.status_code == 400


class TestPlaceOrderInsufficientStock:
    def test_rejection_message_and_rollback(self, api_client, make_product):
        product = make_product(quantity=3)

        response = api_client.post(URL, _body([(product.id, 5)]), format="json")

        assert response.status_code == 400
        assert response.json() == {
            "error": f"Insufficient stock for product {product.id}"
        }
        product.refresh_from_db()
        assert product.quantity == 3
        _assert_no_writes()

    def test_first_short_item_is_named(self, api_client, croissant, baguette, make_product):
        empty = make_product(name="Rye Bread", quantity=0)
        also_empty = make_product(name="Carrot Cake", quantity=0)

        response = api_client.post(
            URL,
            _body([(croissant.id, 1), (empty.id, 1), (also_empty.id, 1), (baguette.id, 1)]),
            format="json",
        )

        assert response.json() == {"error": f"Insufficient stock for product {empty.id}"}
        croissant.refresh_from_db()
        baguette.refresh_from_db()
        assert (croissant.quantity, baguette.quantity) == (5, 10)
        _assert_no_writes()

    def test_unknown_product(self, api_client, croissant):
        response = api_client.post(
            URL, _body([(croissant.id, 1), (999_999, 1)]), format="json"
        )

        assert response.status_code in (400, 500)
        assert "error" in response.json()
        croissant.refresh_from_db()
        assert croissant.quantity == 5
        _assert_no_writes()


class TestPlaceOrderStoreFailure:
    def test_store_error_is_500_with_message(self, api_client, croissant):
        with patch.object(
            DeliveryDjangoRepository,
            "create_for_order",
            side_effect=OperationalError("Lock wait timeout exceeded"),
        ):
            response = api_client.post(URL, _body([(croissant.id, 2)]), format="json")

        assert response.status_code == 500
        assert response.json() == {"error": "Lock wait timeout exceeded"}
        croissant.refresh_from_db()
        assert croissant.quantity == 5
        _assert_no_writes()
