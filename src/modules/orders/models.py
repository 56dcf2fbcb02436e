"""Order, OrderItem, and Delivery models.

Business rules implemented:
- Status transitions are validated against ``VALID_TRANSITIONS``
  (enforced at service layer via ``can_transition_to``).
- Customer and Product FKs use PROTECT to preserve order history.
- OrderItem quantity is always positive (CHECK constraint).
- Each order has exactly one Delivery, created in the same transaction.
"""

from __future__ import annotations

from typing import Any

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.orders.constants import (
    DELIVERY_TRANSITIONS,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    DeliveryStatus,
    OrderStatus,
)


class Order(models.Model):
    """Order aggregate root.

    Created by order placement with status ``pending``. Its identity
    never changes afterwards; only ``status`` moves.
    """

    customer: models.ForeignKey = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    created_at: models.DateTimeField = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.status})"


class OrderItem(models.Model):
    """Line item linking an Order to a Product.

    The same product may appear on several lines of one order.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def __str__(self) -> str:
        return f"product {self.product_id} x{self.quantity}"


class Delivery(models.Model):
    """Delivery record of an order, keyed by the order itself.

    ``location`` stays ``NULL`` until a courier reports one.
    """

    order: models.OneToOneField = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="delivery",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
    )
    location: models.CharField = models.CharField(  # noqa: DJ01
        max_length=255,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "deliveries"
        verbose_name_plural = "deliveries"

    def can_transition_to(self, new_status: str) -> bool:
        allowed = DELIVERY_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.location is not None:
            self.location = self.location.strip() or None
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"Delivery for order #{self.order_id} ({self.status})"
