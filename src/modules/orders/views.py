"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ParseError
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response, flatten_detail
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidDeliveryStatus,
    InvalidOrder,
    InvalidOrderStatus,
    OrderNotFound,
    StoreFailure,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import (
    DeliveryDjangoRepository,
    OrderDjangoRepository,
)
from modules.orders.serializers import (
    DeliverySerializer,
    DeliveryUpdateSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; every write goes through
    the service/repository layer.
    """

    queryset = Order.objects.select_related("customer", "delivery")
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "status", "id"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            delivery_repository=DeliveryDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Apply the ``order_placement`` rate to ``POST /orders`` only."""
        self.throttle_scope = "order_placement" if self.action == "create" else None
        return super().get_throttles()

    def get_serializer_class(self):
        if self.action == "list":
            return OrderListSerializer
        return OrderSerializer

    # ------------------------------------------------------------------
    # Create (order placement)
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /orders

        Returns ``200 {"orderId": <id>}`` on success.
        """
        try:
            payload = request.data
        except ParseError:
            payload = None

        try:
            dto = PlaceOrderDTO.from_payload(payload)
            order = self._service.place_order(dto)
        except InvalidOrder as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST)
        except InsufficientStock as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST)
        except StoreFailure as exc:
            return error_response(exc.message, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"orderId": order.id}, status=status.HTTP_200_OK)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /orders

        Filtering (status, customer, date range) is handled by
        ``OrderFilter`` via ``filter_backends``. Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /orders/{pk}"""
        try:
            order = self._service.get_order(int(pk))
        except (OrderNotFound, TypeError):
            return error_response("Order not found.", status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /orders/{pk}

        Updates order status. Cancellations are **not** allowed via
        this endpoint; use ``POST /orders/{id}/cancel`` instead.
        """
        serializer = OrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(
                flatten_detail(serializer.errors), status.HTTP_400_BAD_REQUEST
            )

        new_status = serializer.validated_data["status"].strip().lower()

        try:
            order = self._service.update_status(int(pk), new_status)
        except (OrderNotFound, TypeError):
            return error_response("Order not found.", status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel (dedicated action)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /orders/{pk}/cancel

        Cancels an order and restores the stock of every line.
        """
        try:
            order = self._service.cancel_order(int(pk))
        except (OrderNotFound, TypeError):
            return error_response("Order not found.", status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get", "patch"])
    def delivery(self, request: Request, pk: str | None = None) -> Response:
        """GET|PATCH /orders/{pk}/delivery"""
        if request.method == "GET":
            try:
                delivery = self._service.get_delivery(int(pk))
            except (OrderNotFound, TypeError):
                return error_response("Order not found.", status.HTTP_404_NOT_FOUND)
            return Response(DeliverySerializer(delivery).data)

        serializer = DeliveryUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(
                flatten_detail(serializer.errors), status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        new_status = data.get("status")
        try:
            delivery = self._service.update_delivery(
                int(pk),
                status=new_status.strip().lower() if new_status else None,
                location=data.get("location"),
            )
        except (OrderNotFound, TypeError):
            return error_response("Order not found.", status.HTTP_404_NOT_FOUND)
        except InvalidDeliveryStatus as exc:
            return error_response(str(exc), status.HTTP_400_BAD_REQUEST)

        return Response(DeliverySerializer(delivery).data)
