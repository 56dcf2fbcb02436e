"""Django ORM implementations of the Order and Delivery repositories.

The placement writes (``create``, ``add_items``, ``create_for_order``)
are not wrapped in their own ``transaction.atomic()``;
the caller owns the unit of work and rolls them back together.

Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog

from django.db import transaction
from django.utils import timezone

from modules.orders.constants import DeliveryStatus, OrderStatus
from modules.orders.models import Delivery, Order, OrderItem
from modules.orders.repositories.interfaces import (
    IDeliveryRepository,
    IOrderRepository,
)

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, customer) -> Order:
        order = Order.objects.create(
            customer=customer,
            status=OrderStatus.PENDING,
            created_at=timezone.now(),
        )
        logger.info("order.row_created", order_id=order.id, customer_id=customer.id)
        return order

    def add_items(self, order: Order, items: Iterable[Any]) -> List[OrderItem]:
        """Insert all line items with a single ``bulk_create``."""
        rows = [
            OrderItem(order=order, product_id=item.product_id, quantity=item.quantity)
            for item in items
        ]
        created = OrderItem.objects.bulk_create(rows)
        logger.info("order.items_created", order_id=order.id, item_count=len(created))
        return created

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK and the delivery
        (single JOIN) and ``prefetch_related`` for items and their
        products. Prevents N+1.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("customer", "delivery")
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters and eager-loaded relations.

        Supported filter keys include:
        - ``status``
        - ``customer_id``
        - ``created_at__date__range``
        """
        queryset = Order.objects.select_related(
            "customer", "delivery"
        ).prefetch_related("items__product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Eager-loads items so the caller can iterate over them while the
        row is locked. Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, TypeError):
            return None

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=entity.id, status=entity.status)
        return entity


class DeliveryDjangoRepository(IDeliveryRepository):
    """Concrete Delivery repository backed by Django ORM."""

    def create_for_order(self, order: Order) -> Delivery:
        delivery = Delivery.objects.create(
            order=order,
            status=DeliveryStatus.PENDING,
            location=None,
        )
        logger.info("delivery.created", order_id=order.id)
        return delivery

    def get_by_id(self, id: int) -> Optional[Delivery]:
        """Retrieve the delivery of order *id*."""
        try:
            return Delivery.objects.filter(order_id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Delivery]:
        queryset = Delivery.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_for_update(self, order_id: int) -> Optional[Delivery]:
        try:
            return Delivery.objects.select_for_update().filter(order_id=order_id).first()
        except (ValueError, TypeError):
            return None

    @transaction.atomic
    def save(self, entity: Delivery) -> Delivery:
        entity.save()
        logger.info(
            "delivery.saved",
            order_id=entity.order_id,
            status=entity.status,
        )
        return entity
