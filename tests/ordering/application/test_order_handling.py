"""Application tests for payment, delivery and back-office status updates."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.admin.dashboard import order_stats
from storefront.ordering.fulfillment import MarkOrderDelivered, UpdateOrderStatus
from storefront.ordering.order import Order
from storefront.ordering.payment import MarkOrderPaid
from storefront.ordering.placement import PlaceOrder, place_order
from storefront.ordering.queries import all_orders, order_for, order_view, orders_of
from storefront.shared.errors import Forbidden, NotFound


@pytest.fixture()
def shopper(make_user):
    return make_user(email="aziz@example.com")


@pytest.fixture()
def order(shopper, make_product, shipping_address):
    product = make_product(price=20.0, stock=10)
    order_id = place_order(
        PlaceOrder(
            user_id=str(shopper.id),
            items=json.dumps([{"product_id": str(product.id), "quantity": 3}]),
            shipping_address=json.dumps(shipping_address),
        )
    )
    return current_domain.repository_for(Order).get(order_id)


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


class TestPayment:
    def test_owner_pays(self, order, shopper):
        current_domain.process(
            MarkOrderPaid(order_id=str(order.id), user_id=str(shopper.id), payment_id="PAY-1", status="COMPLETED"),
            asynchronous=False,
        )
        paid = _reload(order)
        assert paid.is_paid is True
        assert paid.status == "Confirmed"
        assert [entry.status for entry in sorted(paid.status_history, key=lambda e: e.changed_at)] == [
            "Pending",
            "Confirmed",
        ]

    def test_someone_else_cannot_pay(self, order, make_user):
        stranger = make_user(email="stranger@example.com")
        with pytest.raises(Forbidden) as exc:
            current_domain.process(
                MarkOrderPaid(order_id=str(order.id), user_id=str(stranger.id), payment_id="PAY-1"),
                asynchronous=False,
            )
        assert exc.value.message == "Not authorized to update this order"

    def test_paying_twice(self, order, shopper):
        command = MarkOrderPaid(order_id=str(order.id), user_id=str(shopper.id), payment_id="PAY-1")
        current_domain.process(command, asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(command, asynchronous=False)


class TestFulfillment:
    def test_deliver(self, order):
        current_domain.process(MarkOrderDelivered(order_id=str(order.id)), asynchronous=False)
        delivered = _reload(order)
        assert delivered.status == "Delivered"
        assert delivered.is_delivered is True
        assert delivered.delivered_at is not None
        assert len(delivered.status_history) == 2

    def test_status_update_with_tracking(self, order):
        current_domain.process(
            UpdateOrderStatus(order_id=str(order.id), status="Shipped", tracking_number="UZP123", note="Courier"),
            asynchronous=False,
        )
        shipped = _reload(order)
        assert shipped.status == "Shipped"
        assert shipped.tracking_number == "UZP123"
        assert shipped.estimated_delivery is not None

    def test_same_status_adds_no_history(self, order):
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status="Pending"), asynchronous=False)
        assert len(_reload(order).status_history) == 1

    def test_refund(self, order):
        current_domain.process(
            UpdateOrderStatus(order_id=str(order.id), status="Refunded", refund_reason="Damaged", refund_amount=10.0),
            asynchronous=False,
        )
        refunded = _reload(order)
        assert refunded.refund_info.amount == 10.0
        assert refunded.refund_info.refund_id == f"REF-{refunded.order_number}"


class TestOrderQueries:
    def test_owner_and_admin_can_read(self, order, shopper, make_user):
        admin = make_user(email="admin@example.com", role="admin")
        assert order_for(order.id, shopper).id == order.id
        assert order_for(order.id, admin).id == order.id

    def test_stranger_cannot_read(self, order, make_user):
        stranger = make_user(email="stranger@example.com")
        with pytest.raises(Forbidden) as exc:
            order_for(order.id, stranger)
        assert exc.value.message == "Not authorized to access this order"

    def test_missing_order(self, shopper):
        with pytest.raises(NotFound) as exc:
            order_for("0b8e5d3c-7a21-4c0f-8f6e-2d9a1b3c4e5f", shopper)
        assert exc.value.message == "Order not found"

    def test_listings(self, order, shopper):
        assert [o.id for o in orders_of(shopper.id)] == [order.id]
        assert [o.id for o in all_orders(status="Pending")] == [order.id]
        assert all_orders(is_paid=True) == []

    def test_view(self, order):
        view = order_view(order)
        assert view["order_number"] == order.order_number
        assert view["total_price"] == 77.2
        assert view["payment_result"] is None
        assert view["status_history"][0]["status"] == "Pending"


class TestOrderHistoryVolume:
    def test_reads_cover_more_than_a_hundred_orders(self, shopper, make_product, shipping_address):
        product = make_product(price=20.0, stock=500)
        for _ in range(105):
            place_order(
                PlaceOrder(
                    user_id=str(shopper.id),
                    items=json.dumps([{"product_id": str(product.id), "quantity": 1}]),
                    shipping_address=json.dumps(shipping_address),
                )
            )

        assert len(orders_of(shopper.id)) == 105
        assert len(all_orders()) == 105
        assert order_stats()["overview"]["total_orders"] == 105
