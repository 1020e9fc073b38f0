"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A shopper checked out; stock for every line has already been withdrawn."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    user_id: Identifier(required=True)
    item_count: Integer(required=True)
    total_price: Float(required=True)
    payment_method: String(required=True)
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    """Payment for an order was confirmed by the shopper's payment provider."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    payment_id: String()
    amount: Float(required=True)
    paid_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    delivered_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    refund_id: String(required=True)
    amount: Float(required=True)
    reason: String()
