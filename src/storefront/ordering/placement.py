"""PlaceOrder: turn requested lines into an order, all or nothing.

The handler runs inside a single Unit of Work:

1. Every requested line is validated against a fresh read of its product
   (exists, active, enough stock) before any stock is touched.
2. Stock is withdrawn product by product, snapshot lines are captured and
   totals are computed server side.
3. The order is recorded and the shopper's cart is emptied.

Any exception rolls the whole Unit of Work back. Product writes carry the
version read in step 1, so a placement that raced another one fails with
``ExpectedVersionError`` instead of overselling; ``place_order`` retries
those a bounded number of times.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.browsing import active_product
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.identity.user import User
from storefront.ordering.order import Order, PaymentMethod, generate_order_number
from storefront.ordering.pricing import compute_pricing
from storefront.shared.errors import Conflict

logger = structlog.get_logger(__name__)

MAX_PLACEMENT_ATTEMPTS = 3
_ORDER_NUMBER_ATTEMPTS = 5


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id: Identifier(required=True)
    items: Text(required=True)  # JSON array of {product_id, quantity}
    shipping_address: Text(required=True)  # JSON object
    payment_method: String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    coupon_code: String(max_length=50)
    notes: Text()


def merge_lines(raw_items) -> dict:
    """Collapse repeated products into one line each, keeping request order."""
    requested = {}
    for raw in raw_items:
        product_id = str(raw.get("product_id") or "")
        quantity = raw.get("quantity")
        if not product_id:
            raise ValidationError({"items": ["Each item needs a product"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": ["Quantity must be at least 1"]})
        requested[product_id] = requested.get(product_id, 0) + quantity
    return requested


def _fresh_order_number() -> str:
    repo = current_domain.repository_for(Order)
    for _ in range(_ORDER_NUMBER_ATTEMPTS):
        order_number = generate_order_number()
        if repo.find_by_number(order_number) is None:
            return order_number
    raise Conflict("Could not allocate an order number, please try again")


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested = merge_lines(json.loads(command.items))
        if not requested:
            raise ValidationError({"items": ["No order items"]})

        user_repo = current_domain.repository_for(User)
        product_repo = current_domain.repository_for(Product)
        user = user_repo.get(command.user_id)

        # Validate every line before mutating anything
        reserved = []
        for product_id, quantity in requested.items():
            product = active_product(product_id, message=f"Product not found: {product_id}")
            product.ensure_available(quantity)
            reserved.append((product, quantity))

        order_number = _fresh_order_number()
        lines = []
        for product, quantity in reserved:
            product.withdraw_stock(quantity, order_number=order_number)
            product_repo.add(product)
            lines.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "image": product.primary_image,
                    "price": product.price,
                    "quantity": quantity,
                }
            )

        order = Order.place(
            user_id=command.user_id,
            lines=lines,
            shipping_address=json.loads(command.shipping_address),
            pricing=compute_pricing(lines),
            payment_method=command.payment_method,
            coupon_code=command.coupon_code,
            notes=command.notes,
            order_number=order_number,
        )
        current_domain.repository_for(Order).add(order)

        user.clear_cart()
        user_repo.add(user)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            lines=len(lines),
            total_price=order.pricing.total_price,
        )
        return str(order.id)


def place_order(command: PlaceOrder, attempts: int = MAX_PLACEMENT_ATTEMPTS) -> str:
    """Process ``command``, retrying when a concurrent placement won a stock race."""
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            logger.warning(
                "Stock changed during order placement",
                user_id=str(command.user_id),
                attempt=attempt,
                max_attempts=attempts,
            )

    raise Conflict("Stock changed while placing the order, please try again")
