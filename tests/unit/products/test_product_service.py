"""Unit tests for ``ProductService`` and the product DTOs."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from django.db.models import ProtectedError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductInUse, ProductNotFound
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ProductService(repository=ProductDjangoRepository())


class TestProductDTOs:
    def test_create_strips_name(self):
        dto = CreateProductDTO(name="  Baguette ", price="3.20")
        assert dto.name == "Baguette"
        assert dto.price == Decimal("3.20")
        assert dto.quantity == 0
        assert dto.category is None

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "", "price": "1.00"},
            {"name": "Bun", "price": "0"},
            {"name": "Bun", "price": "-1"},
            {"name": "Bun", "price": "abc"},
            {"name": "Bun", "price": "1.00", "quantity": -1},
            {"name": "Bun", "price": "1.00", "quantity": 2_147_483_648},
            {"name": "Bun", "price": "1.005"},
            {"name": "Bun", "price": "123456789.00"},
            {"name": "B" * 256, "price": "1.00"},
            {"name": "Bun", "price": "1.00", "category": "c" * 101},
        ],
    )
    def test_create_rejects(self, fields):
        with pytest.raises(ValidationError):
            CreateProductDTO(**fields)

    def test_update_all_optional(self):
        dto = UpdateProductDTO()
        assert dto.model_dump() == {
            "name": None,
            "price": None,
            "category": None,
            "quantity": None,
        }

    def test_update_rejects_negative_quantity(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO(quantity=-2)


class TestProductService:
    def test_create(self, service):
        product = service.create_product(
            CreateProductDTO(name="Lemon Tart", price="4.60", category="cake", quantity=30)
        )
        assert Product.objects.get(id=product.id).quantity == 30

    def test_update_only_supplied_fields(self, service, croissant):
        product = service.update_product(croissant.id, UpdateProductDTO(quantity=12))
        assert product.quantity == 12
        assert product.name == "Butter Croissant"
        assert product.price == Decimal("2.90")

    def test_update_missing(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product(999_999, UpdateProductDTO(name="x"))

    def test_get_missing(self, service):
        with pytest.raises(ProductNotFound):
            service.get_product(999_999)

    def test_delete_missing(self, service):
        with pytest.raises(ProductNotFound):
            service.delete_product(999_999)

    def test_delete_in_use_becomes_product_in_use(self):
        repo = MagicMock()
        repo.delete.side_effect = ProtectedError("protected", set())
        with pytest.raises(ProductInUse):
            ProductService(repository=repo).delete_product(1)

    def test_list(self, service, croissant, baguette):
        assert len(service.list_products()) == 2
        assert service.list_products({"category": "bread"}) == [baguette]
