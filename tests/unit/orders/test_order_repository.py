"""Unit tests for the Django Order and Delivery repositories."""

from __future__ import annotations

import pytest

from modules.customers.models import Customer
from modules.orders.constants import DeliveryStatus, OrderStatus
from modules.orders.dtos import OrderItemDTO
from modules.orders.models import OrderItem
from modules.orders.repositories.django_repository import (
    DeliveryDjangoRepository,
    OrderDjangoRepository,
)

pytestmark = pytest.mark.unit


@pytest.fixture()
def customer():
    return Customer.objects.create(name="Alice", email="a@x.com")


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


class TestOrderRepository:
    def test_create_is_pending_and_timestamped(self, repo, customer):
        order = repo.create(customer)
        assert order.pk is not None
        assert order.customer_id == customer.id
        assert order.status == OrderStatus.PENDING
        assert order.created_at is not None

    def test_add_items_keeps_request_order(self, repo, customer, croissant, baguette):
        order = repo.create(customer)
        repo.add_items(
            order,
            [
                OrderItemDTO(product_id=baguette.id, quantity=3),
                OrderItemDTO(product_id=croissant.id, quantity=1),
                OrderItemDTO(product_id=baguette.id, quantity=2),
            ],
        )
        rows = list(
            OrderItem.objects.filter(order=order).values_list("product_id", "quantity")
        )
        assert rows == [(baguette.id, 3), (croissant.id, 1), (baguette.id, 2)]

    def test_get_by_id_eager_loads(self, repo, customer, croissant):
        order = repo.create(customer)
        repo.add_items(order, [OrderItemDTO(product_id=croissant.id, quantity=1)])
        DeliveryDjangoRepository().create_for_order(order)

        loaded = repo.get_by_id(order.id)
        assert loaded.customer.name == "Alice"
        assert loaded.delivery.status == DeliveryStatus.PENDING
        assert [i.product.name for i in loaded.items.all()] == ["Butter Croissant"]

    @pytest.mark.parametrize("bad_id", [999_999, "abc", None])
    def test_get_by_id_missing_returns_none(self, repo, bad_id):
        assert repo.get_by_id(bad_id) is None

    def test_list_with_filters(self, repo, customer):
        first = repo.create(customer)
        second = repo.create(customer)
        second.status = OrderStatus.CONFIRMED
        repo.save(second)

        assert {o.id for o in repo.list()} == {first.id, second.id}
        assert [o.id for o in repo.list({"status": OrderStatus.CONFIRMED})] == [second.id]


class TestDeliveryRepository:
    def test_create_for_order(self, repo, customer):
        order = repo.create(customer)
        delivery = DeliveryDjangoRepository().create_for_order(order)
        assert delivery.pk == order.pk
        assert delivery.status == DeliveryStatus.PENDING
        assert delivery.location is None

    def test_save_blank_location_becomes_null(self, repo, customer):
        delivery_repo = DeliveryDjangoRepository()
        delivery = delivery_repo.create_for_order(repo.create(customer))
        delivery.location = "   "
        delivery_repo.save(delivery)
        delivery.refresh_from_db()
        assert delivery.location is None

    def test_get_by_id_is_keyed_by_order(self, repo, customer):
        delivery_repo = DeliveryDjangoRepository()
        order = repo.create(customer)
        delivery_repo.create_for_order(order)
        assert delivery_repo.get_by_id(order.id).order_id == order.id
        assert delivery_repo.get_by_id(999_999) is None
        assert len(delivery_repo.list({"status": DeliveryStatus.PENDING})) == 1
