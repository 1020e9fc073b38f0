"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.ordering.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_number(self, order_number: str) -> Order | None:
        orders = self._dao.query.filter(order_number=order_number).all().items
        return orders[0] if orders else None

    def newest_first(self) -> list[Order]:
        orders = self._dao.query.limit(None).all().items
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    def for_user(self, user_id) -> list[Order]:
        orders = self._dao.query.filter(user_id=str(user_id)).limit(None).all().items
        return sorted(orders, key=lambda order: order.created_at, reverse=True)
