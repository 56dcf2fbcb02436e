"""Order repositories package."""

from modules.orders.repositories.django_repository import (
    DeliveryDjangoRepository,
    OrderDjangoRepository,
)
from modules.orders.repositories.interfaces import IDeliveryRepository, IOrderRepository

__all__ = [
    "IDeliveryRepository",
    "IOrderRepository",
    "DeliveryDjangoRepository",
    "OrderDjangoRepository",
]
