"""Customer API views.

Read-only: customers are created by ``POST /orders``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response
from modules.customers.exceptions import CustomerNotFound
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for listing and retrieving customers."""

    filterset_class = CustomerFilter
    ordering_fields = ["id", "name", "email"]
    ordering = ["id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /customers/{pk}"""
        try:
            customer = self._service.get_customer(int(pk))
        except (CustomerNotFound, TypeError):
            return error_response("Customer not found.", status.HTTP_404_NOT_FOUND)
        return Response(CustomerSerializer(customer).data)
