"""Shared BDD fixtures and step definitions for order placement."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.cart.items import AddToCart
from storefront.catalogue.creation import CreateProduct
from storefront.catalogue.product import Product
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder, place_order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Products created during the scenario, by name."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the placed order id or the captured error."""
    return {"order_id": None, "exc": None}


@pytest.fixture()
def submit_order(shopper, products, outcome, shipping_address):
    def _submit(lines):
        command = PlaceOrder(
            user_id=str(shopper.id),
            items=json.dumps([{"product_id": str(products[name].id), "quantity": qty} for name, qty in lines]),
            shipping_address=json.dumps(shipping_address),
        )
        try:
            outcome["order_id"] = place_order(command)
        except Exception as exc:
            outcome["exc"] = exc

    return _submit


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered shopper", target_fixture="shopper")
def registered_shopper():
    user_id = current_domain.process(
        RegisterUser(name="Dilnoza Karimova", email="dilnoza@example.com", password_hash="hashed"),
        asynchronous=False,
    )
    return current_domain.repository_for(User).get(user_id)


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(products, name, price, stock):
    product_id = current_domain.process(
        CreateProduct(name=name, description=f"{name} description", price=price, category="Electronics", stock=stock),
        asynchronous=False,
    )
    products[name] = current_domain.repository_for(Product).get(product_id)


@given(parsers.cfparse('the shopper has {quantity:d} of "{name}" in the cart'))
def cart_holds(shopper, products, quantity, name):
    current_domain.process(
        AddToCart(user_id=str(shopper.id), product_id=str(products[name].id), quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is placed with status "{status}"'))
def order_placed(outcome, status):
    assert outcome["exc"] is None
    order = current_domain.repository_for(Order).get(outcome["order_id"])
    assert order.status == status


@then(parsers.cfparse('the placement is rejected with "{message}"'))
def placement_rejected(outcome, message):
    assert outcome["order_id"] is None
    assert outcome["exc"] is not None
    assert outcome["exc"].messages["stock"] == [message]


@then("no order exists")
def no_order():
    assert current_domain.repository_for(Order).newest_first() == []


@then(parsers.cfparse('"{name}" has {stock:d} in stock and {sold:d} sold'))
def stock_and_sold(products, name, stock, sold):
    product = current_domain.repository_for(Product).get(products[name].id)
    assert (product.stock, product.sold) == (stock, sold)
