"""Application tests for back-office aggregation with a fixed clock."""

from datetime import UTC, datetime

import pytest
from protean import current_domain

from storefront.admin.dashboard import dashboard_stats, order_stats
from storefront.catalogue.product import Product
from storefront.ordering.order import Order
from storefront.ordering.pricing import compute_pricing

# A Wednesday. The week began on Sunday 1 March.
NOW = datetime(2026, 3, 4, 15, 0, tzinfo=UTC)


@pytest.fixture()
def shopper(make_user):
    return make_user(name="Aziz Rahimov", email="aziz@example.com")


@pytest.fixture()
def record_order(shopper, shipping_address):
    def _record(price, created_at, status=None):
        lines = [{"product_id": "prod-1", "name": "Item", "image": None, "price": price, "quantity": 1}]
        order = Order.place(
            user_id=str(shopper.id),
            lines=lines,
            shipping_address=shipping_address,
            pricing=compute_pricing(lines),
        )
        if status:
            order.change_status(status)
        order.created_at = created_at
        current_domain.repository_for(Order).add(order)
        return order

    return _record


@pytest.fixture()
def history(record_order):
    return {
        "today": record_order(50.0, datetime(2026, 3, 4, 10, 0, tzinfo=UTC)),  # 66.0
        "this_week": record_order(10.0, datetime(2026, 3, 2, 9, 0, tzinfo=UTC), "Delivered"),  # 21.2
        "last_month": record_order(200.0, datetime(2026, 2, 27, 12, 0, tzinfo=UTC), "Cancelled"),  # 224.0
        "last_year": record_order(20.0, datetime(2025, 12, 30, 8, 0, tzinfo=UTC), "Delivered"),  # 32.4
    }


class TestOrderStats:
    def test_overview_by_period(self, history):
        overview = order_stats(now=NOW)["overview"]

        assert overview["total_orders"] == 4
        assert overview["total_revenue"] == 343.6
        assert overview["today_orders"] == 1
        assert overview["today_revenue"] == 66.0
        assert overview["week_orders"] == 2
        assert overview["month_orders"] == 2
        assert overview["month_revenue"] == 87.2

    def test_week_starts_on_sunday(self, record_order):
        record_order(10.0, datetime(2026, 3, 1, 0, 0, tzinfo=UTC))
        record_order(10.0, datetime(2026, 2, 28, 23, 59, tzinfo=UTC))
        assert order_stats(now=NOW)["overview"]["week_orders"] == 1

    def test_status_breakdown(self, history):
        assert order_stats(now=NOW)["status_breakdown"] == [
            {"status": "Pending", "count": 1},
            {"status": "Delivered", "count": 2},
            {"status": "Cancelled", "count": 1},
        ]

    def test_recent_orders_carry_the_customer(self, history, shopper):
        recent = order_stats(now=NOW)["recent_orders"]
        assert [order["order_number"] for order in recent] == [
            history["today"].order_number,
            history["this_week"].order_number,
            history["last_month"].order_number,
            history["last_year"].order_number,
        ]
        assert recent[0]["user"] == {"id": str(shopper.id), "name": "Aziz Rahimov", "email": "aziz@example.com"}

    def test_no_orders(self):
        stats = order_stats(now=NOW)
        assert stats["overview"]["total_orders"] == 0
        assert stats["overview"]["total_revenue"] == 0
        assert stats["status_breakdown"] == []
        assert stats["recent_orders"] == []


class TestDashboardStats:
    def test_monthly_sales_cover_the_current_year(self, history):
        assert dashboard_stats(now=NOW)["charts"]["monthly_sales"] == [
            {"month": 2, "revenue": 224.0, "orders": 1},
            {"month": 3, "revenue": 87.2, "orders": 2},
        ]

    def test_revenue_and_orders(self, history):
        overview = dashboard_stats(now=NOW)["overview"]
        assert overview["orders"] == {"total": 4, "pending": 1, "today": 1, "monthly": 2}
        assert overview["revenue"] == {"total": 343.6, "today": 66.0, "monthly": 87.2}
        assert overview["users"]["total"] == 1

    def test_product_counts_and_top_sellers(self, make_product):
        best = make_product(name="Best Seller", stock=50)
        runner_up = make_product(name="Runner Up", stock=20)
        make_product(name="Sold Out", stock=0)
        hidden = make_product(name="Hidden", stock=40)

        repo = current_domain.repository_for(Product)
        best.withdraw_stock(9)
        runner_up.withdraw_stock(12)
        hidden.set_status(is_active=False)
        for product in (best, runner_up, hidden):
            repo.add(product)

        stats = dashboard_stats(now=NOW)

        assert stats["overview"]["products"] == {"total": 4, "active": 3, "low_stock": 2, "out_of_stock": 1}
        assert [p["name"] for p in stats["top_products"]] == ["Runner Up", "Best Seller"]
        assert stats["top_products"][0]["sold"] == 12
