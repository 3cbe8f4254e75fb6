"""
Pytest configuration and fixtures
"""
from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from cart_client.core.storage import MemoryStorage
from cart_client.services.cart_api import CartApiClient
from cart_client.services.local_store import LocalCartStore
from cart_client.services.reconciler import CartReconciler
from cart_service.database import CartDatabase, ProductDatabase, get_cart_db, get_product_db
from cart_service.main import app as cart_app
from cart_service.security.auth import get_token_verifier
from storefront_shared.auth import TokenIssuer, TokenVerifier
from storefront_shared.cart.models import Product, ProductCategory

TEST_SECRET = "test-secret-for-storefront-cart-service-0123456789"
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def products():
    """Small catalog with tight stock levels"""
    return {
        "p1": Product(
            id="p1",
            name="Desk Lamp",
            price=Decimal("10.00"),
            category=ProductCategory.HOME,
            stock_count=5,
        ),
        "p2": Product(
            id="p2",
            name="Notebook",
            price=Decimal("5.00"),
            category=ProductCategory.BOOKS,
            stock_count=1,
        ),
        "p3": Product(
            id="p3",
            name="Water Bottle",
            price=Decimal("2.50"),
            category=ProductCategory.SPORTS,
            stock_count=100,
        ),
        "p4": Product(
            id="p4",
            name="Vintage Camera",
            price=Decimal("120.00"),
            category=ProductCategory.ELECTRONICS,
            stock_count=0,
            in_stock=False,
        ),
    }


@pytest.fixture
def product_db(products):
    return ProductDatabase(products)


@pytest.fixture
def cart_db(product_db):
    return CartDatabase(product_db)


@pytest.fixture
def issuer():
    return TokenIssuer(secret=TEST_SECRET)


@pytest.fixture
def app(product_db, cart_db):
    """Cart service app wired to fresh storage and the test signing secret"""
    cart_app.dependency_overrides[get_product_db] = lambda: product_db
    cart_app.dependency_overrides[get_cart_db] = lambda: cart_db
    cart_app.dependency_overrides[get_token_verifier] = lambda: TokenVerifier(secret=TEST_SECRET)
    yield cart_app
    cart_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(issuer):
    return {"Authorization": f"Bearer {issuer.issue(USER_ID, email='user1@example.com')}"}


@pytest.fixture
def other_auth_headers(issuer):
    return {"Authorization": f"Bearer {issuer.issue(OTHER_USER_ID)}"}


@pytest.fixture
async def api(app, issuer):
    """Cart API client talking to the app in-process"""
    client = CartApiClient(
        "http://testserver/api",
        access_token=issuer.issue(USER_ID),
        transport=httpx.ASGITransport(app=app),
    )
    yield client
    await client.close()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def local_store(storage):
    return LocalCartStore(storage)


@pytest.fixture
async def reconciler(app, local_store):
    """Anonymous reconciler; call ``login`` to switch to the server store"""
    api = CartApiClient("http://testserver/api", transport=httpx.ASGITransport(app=app))
    reconciler = CartReconciler(api, local_store)
    yield reconciler
    await reconciler.close()
