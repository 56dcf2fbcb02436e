"""Order DRF serializers for API output.

Request bodies are parsed into Pydantic DTOs from ``dtos.py``;
these serializers only render responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Delivery, Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderStatusSerializer(serializers.Serializer):
    """Validates the body of ``PATCH /orders/{id}``."""

    status = serializers.CharField()


class DeliveryUpdateSerializer(serializers.Serializer):
    """Validates the body of ``PATCH /orders/{id}/delivery``."""

    status = serializers.CharField(required=False)
    location = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError(
                "Provide at least one of 'status' or 'location'."
            )
        return attrs


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items."""

    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product_id", "product_name", "quantity"]
        read_only_fields = fields


class DeliverySerializer(serializers.ModelSerializer):
    class Meta:
        model = Delivery
        fields = ["order_id", "status", "location"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and delivery."""

    items = OrderItemSerializer(many=True, read_only=True)
    delivery = DeliverySerializer(read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "status",
            "created_at",
            "items",
            "delivery",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = ["id", "customer_id", "status", "created_at"]
        read_only_fields = fields
