"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from django.db import transaction
from django.db.models import F

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category__iexact": "bread"}
            {"name__icontains": "croissant"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=entity.id)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Hard-delete a product by ID.

        Raises ``django.db.models.ProtectedError`` when order items still
        reference the product.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=id)
        return True

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def decrement_stock(self, id: int, quantity: int) -> bool:
        """``UPDATE products SET quantity = quantity - q WHERE id = ? AND quantity >= q``.

        The row lock taken by the UPDATE serialises concurrent placements
        on the same product; the affected-row count is the only success
        signal.
        """
        affected = Product.objects.filter(id=id, quantity__gte=quantity).update(
            quantity=F("quantity") - quantity
        )
        return affected == 1

    def increment_stock(self, id: int, quantity: int) -> bool:
        affected = Product.objects.filter(id=id).update(
            quantity=F("quantity") + quantity
        )
        return affected == 1
