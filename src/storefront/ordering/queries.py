"""Order reads: access-checked lookups, listings and serialization."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.ordering.order import Order
from storefront.shared.errors import Forbidden, NotFound


def _repo():
    return current_domain.repository_for(Order)


def find_order(order_id) -> Order:
    try:
        return _repo().get(order_id)
    except ObjectNotFoundError:
        raise NotFound("Order not found") from None


def order_for(order_id, user) -> Order:
    """Load an order the given user may see: their own, or any for an admin."""
    order = find_order(order_id)

    if str(order.user_id) != str(user.id) and not user.is_admin:
        raise Forbidden("Not authorized to access this order")
    return order


def orders_of(user_id) -> list[Order]:
    return _repo().for_user(user_id)


def all_orders(status=None, is_paid=None, is_delivered=None) -> list[Order]:
    return [
        order
        for order in _repo().newest_first()
        if (status is None or order.status == status)
        and (is_paid is None or order.is_paid == is_paid)
        and (is_delivered is None or order.is_delivered == is_delivered)
    ]


def order_view(order: Order) -> dict:
    address = order.shipping_address
    payment = order.payment_result
    refund = order.refund_info
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "user_id": str(order.user_id),
        "items": [
            {
                "product_id": str(item.product_id),
                "name": item.name,
                "image": item.image,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in order.items
        ],
        "shipping_address": {
            "name": address.name,
            "phone": address.phone,
            "email": address.email,
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postal_code": address.postal_code,
            "country": address.country,
        },
        "payment_method": order.payment_method,
        "payment_result": (
            {
                "id": payment.payment_id,
                "status": payment.status,
                "update_time": payment.update_time,
                "email_address": payment.email_address,
            }
            if payment
            else None
        ),
        "items_price": order.pricing.items_price,
        "tax_price": order.pricing.tax_price,
        "shipping_price": order.pricing.shipping_price,
        "discount_amount": order.pricing.discount_amount,
        "total_price": order.pricing.total_price,
        "coupon_code": order.coupon_code,
        "is_paid": order.is_paid,
        "paid_at": order.paid_at,
        "is_delivered": order.is_delivered,
        "delivered_at": order.delivered_at,
        "status": order.status,
        "status_history": [
            {"status": entry.status, "changed_at": entry.changed_at, "note": entry.note}
            for entry in sorted(order.status_history, key=lambda entry: entry.changed_at)
        ],
        "tracking_number": order.tracking_number,
        "estimated_delivery": order.estimated_delivery,
        "notes": order.notes,
        "refund_info": (
            {
                "reason": refund.reason,
                "amount": refund.amount,
                "processed_at": refund.processed_at,
                "refund_id": refund.refund_id,
            }
            if refund
            else None
        ),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }
