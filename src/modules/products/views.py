"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import describe_validation_error, error_response
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductInUse, ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService


def _service() -> ProductService:
    return ProductService(repository=ProductDjangoRepository())


def _create_dto(data) -> CreateProductDTO:
    if not isinstance(data, dict):
        data = {}
    return CreateProductDTO(
        name=data.get("name", ""),
        price=data.get("price", 0),
        category=data.get("category"),
        quantity=data.get("quantity", 0),
    )


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Listing goes through the filter backends; every write goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    ordering_fields = ["name", "price", "quantity", "id"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _service()

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /products/{pk}"""
        try:
            product = self._service.get_product(int(pk))
        except (ProductNotFound, TypeError):
            return error_response("Product not found.", status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /products"""
        try:
            dto = _create_dto(request.data)
        except PydanticValidationError as exc:
            return error_response(
                describe_validation_error(exc), status.HTTP_400_BAD_REQUEST
            )

        product = self._service.create_product(dto)
        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /products/{pk}"""
        data = request.data if isinstance(request.data, dict) else {}

        try:
            dto = UpdateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                category=data.get("category"),
                quantity=data.get("quantity"),
            )
        except PydanticValidationError as exc:
            return error_response(
                describe_validation_error(exc), status.HTTP_400_BAD_REQUEST
            )

        try:
            product = self._service.update_product(int(pk), dto)
        except (ProductNotFound, TypeError):
            return error_response("Product not found.", status.HTTP_404_NOT_FOUND)

        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /products/{pk}"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /products/{pk}"""
        try:
            self._service.delete_product(int(pk))
        except (ProductNotFound, TypeError):
            return error_response("Product not found.", status.HTTP_404_NOT_FOUND)
        except ProductInUse as exc:
            return error_response(str(exc), status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Legacy routes
# ----------------------------------------------------------------------


@api_view(["GET"])
def catalogue(request: Request) -> Response:
    """GET /

    The full product list as a bare JSON array (no pagination).
    """
    products = _service().list_products()
    return Response(ProductSerializer(products, many=True).data)


@api_view(["POST"])
def insert_product(request: Request) -> Response:
    """POST /insert

    Same validation as ``POST /products``; answers with the insert result.
    """
    try:
        dto = _create_dto(request.data)
    except PydanticValidationError as exc:
        return error_response(describe_validation_error(exc), status.HTTP_400_BAD_REQUEST)

    product = _service().create_product(dto)
    return Response({"insertId": product.id, "affectedRows": 1})
