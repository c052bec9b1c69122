"""Storefront permission classes."""

from __future__ import annotations

from rest_framework.permissions import BasePermission, IsAuthenticated


class IsStoreAdmin(IsAuthenticated):
    """Authenticated caller whose verified identity carries the admin claim."""

    message = "Administrator access required."

    def has_permission(self, request, view) -> bool:
        if not super().has_permission(request, view):
            return False
        return bool(getattr(request.user, "is_admin", False))


class ReadOnlyOrStoreAdmin(BasePermission):
    """Anyone may read; only the store administrator may write."""

    message = IsStoreAdmin.message

    def has_permission(self, request, view) -> bool:
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return IsStoreAdmin().has_permission(request, view)
