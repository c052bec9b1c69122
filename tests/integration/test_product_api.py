"""Integration tests for the rice catalog API."""

from __future__ import annotations

import pytest

from modules.catalog.models import RiceProduct
from modules.inventory.models import Stock

pytestmark = pytest.mark.integration

PRODUCTS_URL = "/api/v1/products/"


@pytest.fixture()
def product_payload():
    return {
        "name": "Basmati Rice",
        "description": "Long-grain, aromatic rice for Biryani.",
        "original_price": "100.00",
        "discount_percentage": "15",
        "image_url": "/images/basmati.jpeg",
        "category": "Biryani",
    }


@pytest.fixture()
def created_product(admin_client, product_payload):
    response = admin_client.post(PRODUCTS_URL, product_payload, format="json")
    assert response.status_code == 201
    return response.json()


class TestBrowseCatalog:
    def test_anonymous_can_list(self, api_client, created_product):
        response = api_client.get(PRODUCTS_URL)

        assert response.status_code == 200
        assert response.json()["results"][0]["name"] == "Basmati Rice"

    def test_filter_by_category(self, api_client, admin_client, created_product, product_payload):
        admin_client.post(
            PRODUCTS_URL,
            {**product_payload, "name": "Premium Idly Rice", "category": "Idly"},
            format="json",
        )

        response = api_client.get(PRODUCTS_URL, {"category": "idly"})

        assert [row["name"] for row in response.json()["results"]] == ["Premium Idly Rice"]

    def test_retrieve(self, api_client, created_product):
        response = api_client.get(f"{PRODUCTS_URL}{created_product['id']}/")

        assert response.status_code == 200
        assert response.json()["effective_price"] == "85.00"

    def test_retrieve_unknown(self, api_client):
        response = api_client.get(f"{PRODUCTS_URL}not-a-uuid/")

        assert response.status_code == 404
        assert response.json()["detail"] == "Rice product not found."


class TestManageCatalog:
    def test_create_adds_empty_stock_entry(self, created_product):
        stock = Stock.objects.get(name="Basmati Rice")

        assert created_product["category"] == "Biryani"
        assert (stock.bought_total, stock.available) == (0, 0)

    def test_duplicate_name_is_409(self, admin_client, created_product, product_payload):
        response = admin_client.post(PRODUCTS_URL, product_payload, format="json")

        assert response.status_code == 409

    def test_invalid_payload_is_400(self, admin_client, product_payload):
        product_payload["original_price"] = "0"

        response = admin_client.post(PRODUCTS_URL, product_payload, format="json")

        assert response.status_code == 400
        assert not RiceProduct.objects.exists()

    def test_customer_cannot_create(self, customer_client, product_payload):
        response = customer_client.post(PRODUCTS_URL, product_payload, format="json")

        assert response.status_code == 403
        assert response.json()["detail"] == "Administrator access required."

    def test_rename_moves_stock_entry(self, admin_client, created_product):
        Stock.objects.filter(name="Basmati Rice").update(bought_total=30, available=30)

        response = admin_client.patch(
            f"{PRODUCTS_URL}{created_product['id']}/",
            {"name": "Royal Basmati Rice"},
            format="json",
        )

        assert response.status_code == 200
        assert Stock.objects.get(name="Royal Basmati Rice").available == 30

    def test_rename_onto_restocked_name_merges_entries(self, admin_client, product_payload):
        admin_client.put(
            "/api/v1/stocks/populate/", {"name": "Ponni", "quantity": 30}, format="json"
        )
        created = admin_client.post(
            PRODUCTS_URL, {**product_payload, "name": "Ponni Old"}, format="json"
        ).json()
        Stock.objects.filter(name="Ponni Old").update(bought_total=10, available=4)

        response = admin_client.patch(
            f"{PRODUCTS_URL}{created['id']}/", {"name": "Ponni"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Ponni"
        stock = Stock.objects.get(name="Ponni")
        assert (stock.bought_total, stock.available) == (40, 34)
        assert not Stock.objects.filter(name="Ponni Old").exists()

    def test_empty_update_is_400(self, admin_client, created_product):
        response = admin_client.patch(
            f"{PRODUCTS_URL}{created_product['id']}/", {}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "No update data provided."

    def test_delete_removes_stock_entry(self, admin_client, created_product):
        response = admin_client.delete(f"{PRODUCTS_URL}{created_product['id']}/")

        assert response.status_code == 204
        assert not Stock.objects.filter(name="Basmati Rice").exists()

    def test_checkout_deducts_catalog_product_stock(self, customer_client, created_product):
        Stock.objects.filter(name="Basmati Rice").update(bought_total=100, available=100)

        response = customer_client.post(
            "/api/v1/orders/",
            {
                "user_details": {"name": "Asha", "phone": "9876543210", "address": "Pune"},
                "cart_items": [{"name": "Basmati Rice", "price": "85.00", "quantity": 4}],
            },
            format="json",
        )

        assert response.status_code == 201
        assert Stock.objects.get(name="Basmati Rice").available == 96
