"""Inventory URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.inventory.views import StockViewSet

router = DefaultRouter(trailing_slash=True)
router.register("stocks", StockViewSet, basename="stock")

urlpatterns = router.urls
