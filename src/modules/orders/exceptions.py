"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import Optional

from modules.orders.constants import PlacementStage


class InvalidOrder(Exception):
    """The placement request is malformed (no customer, no items, bad quantity).

    Raised before any database work is attempted.
    """

    def __init__(self, message: str = "Invalid order") -> None:
        super().__init__(message)


class InsufficientStock(Exception):
    """A product holds fewer units than a line item requests, or does not exist."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Insufficient stock for product {product_id}")


class StoreFailure(Exception):
    """The database rejected part of the placement; the transaction was rolled back.

    ``stage`` is the last placement stage reached before the failure.
    """

    def __init__(self, message: str, stage: Optional[PlacementStage] = None) -> None:
        self.message = message
        self.stage = stage
        super().__init__(message)


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderStatus(Exception):
    """An invalid order status transition was attempted."""


class InvalidDeliveryStatus(Exception):
    """An invalid delivery status transition was attempted."""
