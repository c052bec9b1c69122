import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.core.authentication import FirebaseUser
from modules.inventory.models import Stock

CUSTOMER_EMAIL = "asha@example.com"
OTHER_EMAIL = "ravi@example.com"
ADMIN_EMAIL = "owner@ricemart.test"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


def make_user(email=CUSTOMER_EMAIL, uid="uid-asha", admin=False):
    claims = {"user_id": uid, "email": email}
    if admin:
        claims["admin"] = True
    return FirebaseUser(claims)


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def customer_client():
    client = APIClient()
    client.force_authenticate(user=make_user())
    return client


@pytest.fixture()
def other_client():
    client = APIClient()
    client.force_authenticate(user=make_user(email=OTHER_EMAIL, uid="uid-ravi"))
    return client


@pytest.fixture()
def admin_client():
    client = APIClient()
    client.force_authenticate(user=make_user(email=ADMIN_EMAIL, uid="uid-owner", admin=True))
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def basmati():
    return Stock.objects.create(name="Basmati", bought_total=100, available=100)


@pytest.fixture()
def sona_masoori():
    return Stock.objects.create(name="Sona Masoori", bought_total=80, available=80)
