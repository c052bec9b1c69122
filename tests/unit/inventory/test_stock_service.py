"""Unit tests for StockService (ledger reads, deltas, restocking)."""

from __future__ import annotations

import pytest

from modules.inventory.constants import AppliedResult
from modules.inventory.exceptions import InvalidStockQuantity, StockNotFound
from modules.inventory.models import Stock
from modules.inventory.repositories.django_repository import StockDjangoRepository
from modules.inventory.services import StockService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return StockService(repository=StockDjangoRepository())


class TestApplyDelta:
    def test_negative_delta_reduces_available_only(self, service, basmati):
        result = service.apply_delta("Basmati", -5)

        basmati.refresh_from_db()
        assert result is AppliedResult.APPLIED
        assert basmati.available == 95
        assert basmati.bought_total == 100

    def test_positive_delta_restores_available(self, service, basmati):
        service.apply_delta("Basmati", -5)
        service.apply_delta("Basmati", 5)

        basmati.refresh_from_db()
        assert basmati.available == 100

    def test_available_may_go_negative(self, service):
        stock = Stock.objects.create(name="Jeera Rice", bought_total=3, available=3)

        service.apply_delta("Jeera Rice", -10)

        stock.refresh_from_db()
        assert stock.available == -7

    def test_unknown_name_is_not_matched(self, service, basmati):
        result = service.apply_delta("Ponni", -5)

        basmati.refresh_from_db()
        assert result is AppliedResult.NOT_MATCHED
        assert basmati.available == 100
        assert not Stock.objects.filter(name="Ponni").exists()

    def test_match_is_exact(self, service, basmati):
        assert service.apply_delta("basmati", -1) is AppliedResult.NOT_MATCHED
        assert service.apply_delta("Basmati ", -1) is AppliedResult.NOT_MATCHED

    def test_zero_delta_on_existing_entry_is_unchanged(self, service, basmati):
        assert service.apply_delta("Basmati", 0) is AppliedResult.UNCHANGED

    def test_zero_delta_on_missing_entry_is_not_matched(self, service):
        assert service.apply_delta("Ponni", 0) is AppliedResult.NOT_MATCHED


class TestPopulate:
    def test_existing_entry_grows_both_totals(self, service, basmati):
        stock, created = service.populate("Basmati", 20)

        assert created is False
        assert stock.bought_total == 120
        assert stock.available == 120

    def test_missing_entry_is_created(self, service):
        stock, created = service.populate("Kolam", 40)

        assert created is True
        assert stock.bought_total == 40
        assert stock.available == 40

    def test_name_is_stripped(self, service, basmati):
        stock, created = service.populate("  Basmati  ", 10)

        assert created is False
        assert stock.name == "Basmati"
        assert stock.available == 110

    def test_populate_after_oversell_adds_to_negative_balance(self, service):
        Stock.objects.create(name="Jeera Rice", bought_total=3, available=-7)

        stock, _ = service.populate("Jeera Rice", 10)

        assert stock.available == 3
        assert stock.bought_total == 13

    @pytest.mark.parametrize(
        "name, quantity",
        [("", 10), ("   ", 10), ("Basmati", 0), ("Basmati", -3), (None, 10), ("Basmati", None)],
    )
    def test_invalid_input_is_rejected_without_writing(self, service, basmati, name, quantity):
        with pytest.raises(InvalidStockQuantity, match="positive quantity"):
            service.populate(name, quantity)

        basmati.refresh_from_db()
        assert basmati.bought_total == 100
        assert basmati.available == 100
        assert Stock.objects.count() == 1


class TestQueries:
    def test_get_stock(self, service, basmati):
        assert service.get_stock("Basmati").id == basmati.id

    def test_get_stock_missing_raises(self, service):
        with pytest.raises(StockNotFound):
            service.get_stock("Ponni")

    def test_list_stocks_sorted_by_name(self, service, basmati, sona_masoori):
        Stock.objects.create(name="Ambemohar", bought_total=5, available=5)

        names = [stock.name for stock in service.list_stocks()]

        assert names == ["Ambemohar", "Basmati", "Sona Masoori"]

    def test_list_by_names_ignores_unknown(self, service, basmati, sona_masoori):
        stocks = service.list_by_names(["Sona Masoori", "Ponni", "Sona Masoori"])

        assert [stock.name for stock in stocks] == ["Sona Masoori"]


class TestCatalogHooks:
    def test_create_for_catalog_product_starts_empty(self, service):
        stock = service.create_for_catalog_product("Matta Rice")

        assert stock.bought_total == 0
        assert stock.available == 0

    def test_create_for_catalog_product_keeps_existing_entry(self, service, basmati):
        stock = service.create_for_catalog_product("Basmati")

        assert stock.id == basmati.id
        assert stock.available == 100

    def test_rename_rekeys_entry(self, service, basmati):
        assert service.rename_product("Basmati", "Royal Basmati") is True

        basmati.refresh_from_db()
        assert basmati.name == "Royal Basmati"
        assert basmati.available == 100

    def test_rename_to_same_name_is_noop(self, service, basmati):
        assert service.rename_product("Basmati", "Basmati") is False

    def test_rename_without_entry_returns_false(self, service):
        assert service.rename_product("Ponni", "Ponni Boiled") is False

    def test_rename_onto_existing_entry_merges_totals(self, service, basmati):
        Stock.objects.create(name="Royal Basmati", bought_total=30, available=-5)

        assert service.rename_product("Basmati", "Royal Basmati") is True

        merged = Stock.objects.get(name="Royal Basmati")
        assert (merged.bought_total, merged.available) == (130, 95)
        assert not Stock.objects.filter(name="Basmati").exists()

    def test_rename_without_entry_leaves_target_alone(self, service):
        Stock.objects.create(name="Ponni Boiled", bought_total=30, available=30)

        assert service.rename_product("Ponni", "Ponni Boiled") is False
        assert Stock.objects.get(name="Ponni Boiled").available == 30

    def test_delete_by_product_name(self, service, basmati):
        assert service.delete_by_product_name("Basmati") is True
        assert service.delete_by_product_name("Basmati") is False
        assert not Stock.objects.exists()
