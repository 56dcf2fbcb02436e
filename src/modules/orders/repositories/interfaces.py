"""Order and Delivery repository interfaces.

Extend ``IRepository`` with the writes performed by order placement
(order row, line items, delivery row) and the row-locking reads used
by status changes.

The Service Layer depends exclusively on these contracts (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer
    from modules.orders.dtos import OrderItemDTO
    from modules.orders.models import Delivery, Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, customer: Customer) -> Order:
        """Insert a ``pending`` order for *customer*, stamped with the current time."""

    @abstractmethod
    def add_items(self, order: Order, items: Iterable[OrderItemDTO]) -> List[OrderItem]:
        """Insert one line item per entry of *items*, in order."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with its customer, items and delivery."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until the transaction ends."""


class IDeliveryRepository(IRepository["Delivery"]):
    """Repository contract for Delivery records (keyed by order id)."""

    @abstractmethod
    def create_for_order(self, order: Order) -> Delivery:
        """Insert a ``pending`` delivery with no location for *order*."""

    @abstractmethod
    def get_for_update(self, order_id: int) -> Optional[Delivery]:
        """Retrieve the delivery of an order holding a row-level lock."""
