"""Unit tests for ProductService and its stock ledger hooks."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.management import call_command
from pydantic import ValidationError

from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.models import RiceCategory, RiceProduct
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.services import ProductService
from modules.inventory.models import Stock
from modules.inventory.repositories.django_repository import StockDjangoRepository
from modules.inventory.services import StockService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ProductService(
        repository=ProductDjangoRepository(),
        stock_service=StockService(repository=StockDjangoRepository()),
    )


def _create_dto(**overrides):
    fields = {
        "name": "Basmati Rice",
        "description": "Long-grain, aromatic rice for Biryani.",
        "original_price": Decimal("100"),
        "discount_percentage": Decimal("10"),
        "image_url": "/images/basmati.jpeg",
        "category": RiceCategory.BIRYANI.value,
    }
    fields.update(overrides)
    return CreateProductDTO(**fields)


@pytest.fixture()
def basmati_product(service):
    return service.create_product(_create_dto())


class TestCreateProduct:
    def test_creates_product_and_empty_stock_entry(self, basmati_product):
        stock = Stock.objects.get(name="Basmati Rice")

        assert basmati_product.category == RiceCategory.BIRYANI
        assert stock.bought_total == 0
        assert stock.available == 0

    def test_existing_stock_entry_is_kept(self, service):
        Stock.objects.create(name="Ponni Rice", bought_total=30, available=12)

        service.create_product(_create_dto(name="Ponni Rice"))

        assert Stock.objects.get(name="Ponni Rice").available == 12

    def test_duplicate_name_conflicts(self, service, basmati_product):
        with pytest.raises(ProductAlreadyExists, match="already exists"):
            service.create_product(_create_dto())

        assert RiceProduct.objects.count() == 1

    def test_name_is_stripped(self, service):
        product = service.create_product(_create_dto(name="  Red Rice  "))

        assert product.name == "Red Rice"
        assert Stock.objects.filter(name="Red Rice").exists()

    def test_effective_price_applies_discount(self, basmati_product):
        assert basmati_product.effective_price == Decimal("90.00")


class TestUpdateProduct:
    def test_rename_rekeys_stock(self, service, basmati_product):
        Stock.objects.filter(name="Basmati Rice").update(bought_total=50, available=45)

        product = service.update_product(
            basmati_product.id, UpdateProductDTO(name="Royal Basmati Rice")
        )

        assert product.name == "Royal Basmati Rice"
        assert not Stock.objects.filter(name="Basmati Rice").exists()
        assert Stock.objects.get(name="Royal Basmati Rice").available == 45

    def test_price_change_leaves_stock_alone(self, service, basmati_product):
        product = service.update_product(
            basmati_product.id, UpdateProductDTO(original_price=Decimal("120"))
        )

        assert product.original_price == Decimal("120")
        assert Stock.objects.filter(name="Basmati Rice").exists()

    def test_rename_onto_existing_name_conflicts(self, service, basmati_product):
        service.create_product(_create_dto(name="Brown Rice"))

        with pytest.raises(ProductAlreadyExists):
            service.update_product(basmati_product.id, UpdateProductDTO(name="Brown Rice"))

    def test_missing_product(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product("not-a-uuid", UpdateProductDTO(name="X"))

    def test_changes_skip_unset_fields(self):
        assert UpdateProductDTO(description="New").changes() == {"description": "New"}


class TestDeleteProduct:
    def test_delete_removes_stock_entry(self, service, basmati_product):
        service.delete_product(basmati_product.id)

        assert not RiceProduct.objects.exists()
        assert not Stock.objects.filter(name="Basmati Rice").exists()

    def test_delete_missing_product(self, service):
        with pytest.raises(ProductNotFound):
            service.delete_product("00000000-0000-0000-0000-000000000000")


class TestProductDTOs:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "  "},
            {"original_price": Decimal("0")},
            {"discount_percentage": Decimal("101")},
            {"category": "Pulao"},
        ],
    )
    def test_invalid_create_payload(self, overrides):
        with pytest.raises(ValidationError):
            _create_dto(**overrides)

    def test_blank_rename_rejected(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO(name="   ")


class TestSeedCatalogCommand:
    def test_seeds_products_and_stock(self):
        call_command("seed_catalog", "--stock", "100")

        assert RiceProduct.objects.count() == 13
        assert Stock.objects.get(name="Basmati Rice").available == 100

    def test_rerun_skips_existing_products(self):
        call_command("seed_catalog")
        call_command("seed_catalog")

        assert RiceProduct.objects.count() == 13
