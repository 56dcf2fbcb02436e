"""Product repository interface.

Extends ``IRepository[Product]`` with the inventory mutations used by
order placement and cancellation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Remove a product by ID."""

    @abstractmethod
    def decrement_stock(self, id: int, quantity: int) -> bool:
        """Atomically take ``quantity`` units out of stock.

        Must be a single conditional mutation (no read-then-write).
        Returns ``False`` when the product does not exist or holds
        fewer than ``quantity`` units; nothing is changed in that case.
        """

    @abstractmethod
    def increment_stock(self, id: int, quantity: int) -> bool:
        """Atomically put ``quantity`` units back into stock."""
