"""Order domain constants.

Defines status choices and valid status transitions for the order and
delivery state machines, plus the stages of order placement.
"""

from enum import Enum

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    READY = "ready", "Ready"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


class DeliveryStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"
    FAILED = "failed", "Failed"
    CANCELLED = "cancelled", "Cancelled"


DELIVERY_TRANSITIONS: dict[str, set[str]] = {
    DeliveryStatus.PENDING: {DeliveryStatus.OUT_FOR_DELIVERY, DeliveryStatus.CANCELLED},
    DeliveryStatus.OUT_FOR_DELIVERY: {DeliveryStatus.DELIVERED, DeliveryStatus.FAILED},
    DeliveryStatus.DELIVERED: set(),
    DeliveryStatus.FAILED: set(),
    DeliveryStatus.CANCELLED: set(),
}


class PlacementStage(str, Enum):
    """Stages of ``OrderService.place_order``.

    Stages advance strictly in declaration order. Any failure before
    ``COMMITTED`` moves the placement to ``ROLLED_BACK``.
    """

    STARTED = "started"
    CUSTOMER_RESOLVED = "customer_resolved"
    ORDER_CREATED = "order_created"
    ITEMS_INSERTED = "items_inserted"
    INVENTORY_UPDATED = "inventory_updated"
    DELIVERY_CREATED = "delivery_created"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
