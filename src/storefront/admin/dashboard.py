"""Back-office aggregation queries. Read only.

Calendar periods (today, this week, this month, this year) are computed in
UTC. Weeks start on Sunday.
"""

from collections import Counter
from datetime import UTC, datetime, timedelta

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import LOW_STOCK_THRESHOLD, Product
from storefront.identity.user import User
from storefront.ordering.order import Order, OrderStatus

TOP_PRODUCTS_COUNT = 5
DASHBOARD_RECENT_ORDERS = 10
STATS_RECENT_ORDERS = 5


def _periods(now: datetime) -> dict:
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return {
        "day": start_of_day,
        # isoweekday: Monday=1 .. Sunday=7
        "week": start_of_day - timedelta(days=now.isoweekday() % 7),
        "month": start_of_day.replace(day=1),
        "year": start_of_day.replace(month=1, day=1),
    }


def _revenue(orders) -> float:
    return round(sum(order.pricing.total_price for order in orders), 2)


def _since(records, start):
    return [record for record in records if record.created_at >= start]


def status_breakdown(orders) -> list[dict]:
    counts = Counter(order.status for order in orders)
    return [{"status": status.value, "count": counts[status.value]} for status in OrderStatus if counts[status.value]]


def _recent_orders(orders, limit):
    users = current_domain.repository_for(User)
    recent = []
    for order in sorted(orders, key=lambda order: order.created_at, reverse=True)[:limit]:
        try:
            user = users.get(order.user_id)
            customer = {"id": str(user.id), "name": user.name, "email": user.email}
        except ObjectNotFoundError:
            customer = None
        recent.append(
            {
                "id": str(order.id),
                "order_number": order.order_number,
                "user": customer,
                "total_price": order.pricing.total_price,
                "status": order.status,
                "created_at": order.created_at,
            }
        )
    return recent


def monthly_sales(orders, now: datetime) -> list[dict]:
    """Revenue and order count per calendar month of the current year."""
    start_of_year = _periods(now)["year"]
    months: dict[int, dict] = {}
    for order in _since(orders, start_of_year):
        month = order.created_at.month
        bucket = months.setdefault(month, {"month": month, "revenue": 0.0, "orders": 0})
        bucket["revenue"] = round(bucket["revenue"] + order.pricing.total_price, 2)
        bucket["orders"] += 1
    return [months[month] for month in sorted(months)]


def dashboard_stats(now: datetime | None = None) -> dict:
    now = now or datetime.now(UTC)
    periods = _periods(now)

    customers = current_domain.repository_for(User).customers()
    products = current_domain.repository_for(Product).everything()
    orders = current_domain.repository_for(Order).newest_first()

    top_products = sorted((p for p in products if p.sold > 0), key=lambda p: p.sold, reverse=True)
    todays_orders = _since(orders, periods["day"])
    months_orders = _since(orders, periods["month"])

    return {
        "overview": {
            "users": {
                "total": len(customers),
                "new_today": len(_since(customers, periods["day"])),
                "new_this_month": len(_since(customers, periods["month"])),
            },
            "products": {
                "total": len(products),
                "active": sum(1 for p in products if p.is_active),
                "low_stock": sum(1 for p in products if p.stock <= LOW_STOCK_THRESHOLD),
                "out_of_stock": sum(1 for p in products if p.stock == 0),
            },
            "orders": {
                "total": len(orders),
                "pending": sum(1 for o in orders if o.status == OrderStatus.PENDING.value),
                "today": len(todays_orders),
                "monthly": len(months_orders),
            },
            "revenue": {
                "total": _revenue(orders),
                "today": _revenue(todays_orders),
                "monthly": _revenue(months_orders),
            },
        },
        "charts": {
            "monthly_sales": monthly_sales(orders, now),
            "order_status_breakdown": status_breakdown(orders),
        },
        "top_products": [
            {
                "id": str(p.id),
                "name": p.name,
                "sold": p.sold,
                "price": p.price,
                "image": p.primary_image,
            }
            for p in top_products[:TOP_PRODUCTS_COUNT]
        ],
        "recent_orders": _recent_orders(orders, DASHBOARD_RECENT_ORDERS),
    }


def order_stats(now: datetime | None = None) -> dict:
    now = now or datetime.now(UTC)
    periods = _periods(now)
    orders = current_domain.repository_for(Order).newest_first()

    todays_orders = _since(orders, periods["day"])
    months_orders = _since(orders, periods["month"])

    return {
        "overview": {
            "total_orders": len(orders),
            "total_revenue": _revenue(orders),
            "today_orders": len(todays_orders),
            "today_revenue": _revenue(todays_orders),
            "week_orders": len(_since(orders, periods["week"])),
            "month_orders": len(months_orders),
            "month_revenue": _revenue(months_orders),
        },
        "status_breakdown": status_breakdown(orders),
        "recent_orders": _recent_orders(orders, STATS_RECENT_ORDERS),
    }
