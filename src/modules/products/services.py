"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.db.models import ProtectedError

from modules.products.exceptions import ProductInUse, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        product = Product(
            name=dto.name,
            price=dto.price,
            category=dto.category,
            quantity=dto.quantity,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=product.id)
        return product

    @transaction.atomic
    def update_product(self, id: int, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        for field in ("name", "price", "category", "quantity"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=id)
        return product

    def delete_product(self, id: int) -> None:
        """Remove a product.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if order items reference the product.
        """
        try:
            deleted = self._repo.delete(id)
        except ProtectedError as exc:
            logger.warning("product.delete_blocked", product_id=id)
            raise ProductInUse(
                f"Product {id} is referenced by existing orders."
            ) from exc
        if not deleted:
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """Return a list of products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
