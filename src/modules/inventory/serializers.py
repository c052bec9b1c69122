"""Inventory DRF serializers (output only; input goes through DTOs)."""

from __future__ import annotations

from rest_framework import serializers

from modules.inventory.models import Stock


class StockSerializer(serializers.ModelSerializer):
    class Meta:
        model = Stock
        fields = ["id", "name", "bought_total", "available", "updated_at"]
        read_only_fields = fields


class SalesSummarySerializer(serializers.Serializer):
    name = serializers.CharField()
    total_sold = serializers.IntegerField()
