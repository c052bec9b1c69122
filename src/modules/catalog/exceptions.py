"""Catalog domain exceptions."""

from __future__ import annotations


class ProductAlreadyExists(Exception):
    """Another product already uses this name."""


class ProductNotFound(Exception):
    """The requested product does not exist."""
