import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_configure(config):
    # Test modules import domain elements at collection, and the domain reads
    # its config overlay when it is constructed
    os.environ["PROTEAN_ENV"] = config.getoption("--env")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Builders shared across areas
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_user():
    """Register a user through the domain and return the stored aggregate."""
    from protean import current_domain

    from storefront.identity.registration import RegisterUser
    from storefront.identity.security import hash_password
    from storefront.identity.user import User

    def _make(name="Test Shopper", email="shopper@example.com", password="secret123", role="user", phone=None):
        user_id = current_domain.process(
            RegisterUser(
                name=name,
                email=email,
                password_hash=hash_password(password),
                phone=phone,
                role=role,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _make


@pytest.fixture()
def make_product():
    """Create a product through the domain and return the stored aggregate."""
    from protean import current_domain

    from storefront.catalogue.creation import CreateProduct
    from storefront.catalogue.product import Product

    def _make(name="Wireless Earbuds", price=20.0, stock=5, category="Electronics", brand="Soundwave", **fields):
        product_id = current_domain.process(
            CreateProduct(
                name=name,
                description=fields.pop("description", f"{name} description"),
                price=price,
                stock=stock,
                category=category,
                brand=brand,
                **fields,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def shipping_address():
    return {
        "name": "Dilnoza Karimova",
        "phone": "+998901234567",
        "email": "dilnoza@example.com",
        "street": "12 Amir Temur Avenue",
        "city": "Tashkent",
        "state": "Tashkent",
        "postal_code": "100000",
    }


@pytest.fixture()
def client(_storefront_domain):
    """A TestClient over every storefront router, wired like the real app."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from storefront.admin.api import admin_router
    from storefront.cart.api import cart_router
    from storefront.catalogue.api import product_router
    from storefront.identity.api import auth_router
    from storefront.ordering.api import order_router
    from storefront.shared.http import bind_domain_context, register_exception_handlers

    app = FastAPI()
    bind_domain_context(app, _storefront_domain)
    register_exception_handlers(app)
    for router in (auth_router, product_router, cart_router, order_router, admin_router):
        app.include_router(router, prefix="/api")
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    """Bearer headers for a stored user."""
    from storefront.identity.authentication import issue_token

    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers
