"""Order DRF serializers (read side).

Order input goes through ``CreateOrderDTO``; these serializers only shape
responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["id", "product_name", "quantity", "unit_price", "subtotal"]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "changed_by",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class UserDetailsSerializer(serializers.Serializer):
    email = serializers.EmailField(source="purchaser_email")
    name = serializers.CharField(source="purchaser_name")
    phone = serializers.CharField(source="purchaser_phone")
    address = serializers.CharField(source="purchaser_address")


class OrderSerializer(serializers.ModelSerializer):
    """Full order: contact details, cart lines and status history."""

    user_details = UserDetailsSerializer(source="*", read_only=True)
    cart_items = OrderItemSerializer(source="items", many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_details",
            "purchaser_uid",
            "product_name",
            "quantity",
            "description",
            "total_price",
            "cart_items",
            "status",
            "stock_deducted",
            "stock_refunded",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    """Documents the body of ``PATCH /orders/{id}/``."""

    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
