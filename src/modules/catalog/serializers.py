"""Catalog DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import RiceProduct


class ProductSerializer(serializers.ModelSerializer):
    effective_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = RiceProduct
        fields = [
            "id",
            "name",
            "description",
            "original_price",
            "discount_percentage",
            "effective_price",
            "image_url",
            "category",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
