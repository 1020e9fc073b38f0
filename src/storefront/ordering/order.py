"""Order aggregate: the record a checkout leaves behind.

Orders are created only by the placement sequence (see ``placement.py``) and
are never deleted. Line items are snapshots: they keep the name, image and
price the shopper paid even if the catalog changes later.

Status Machine:
    Pending → Confirmed → Processing → Shipped → Out for Delivery → Delivered
    side branches: Cancelled, Returned, Refunded

The transition table below currently lets administrators move an order from
any status to any other. Every real change appends one entry to the
append-only status history; re-setting the current status is not a change.
"""

import secrets
import string
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.ordering.events import (
    OrderDelivered,
    OrderPaid,
    OrderPlaced,
    OrderRefunded,
    OrderStatusChanged,
)

ORDER_NUMBER_PREFIX = "UZ"
SHIPPING_ESTIMATE = timedelta(days=3)
_ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"
    REFUNDED = "Refunded"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "Cash on Delivery"
    CREDIT_CARD = "Credit Card"
    BANK_TRANSFER = "Bank Transfer"
    UZCARD = "UzCard"
    HUMO = "Humo"


# Administrators may correct an order to any status
_ALLOWED_TRANSITIONS = {status: set(OrderStatus) - {status} for status in OrderStatus}


def _utcnow():
    return datetime.now(UTC)


def generate_order_number(now=None) -> str:
    """``UZ`` + ``YYMMDD`` + four random base-36 characters."""
    now = now or _utcnow()
    suffix = "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(4))
    return f"{ORDER_NUMBER_PREFIX}{now:%y%m%d}{suffix}"


def _status_note(status: str) -> str:
    return f"Order status changed to {status}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where and to whom the order goes, as captured at checkout."""

    name: String(required=True, max_length=100)
    phone: String(required=True, max_length=20)
    email: String(required=True, max_length=254)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(max_length=100, default="Uzbekistan")


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Money summary of an order, locked at placement."""

    items_price: Float(required=True, min_value=0.0)
    tax_price: Float(required=True, min_value=0.0)
    shipping_price: Float(required=True, min_value=0.0)
    discount_amount: Float(min_value=0.0, default=0.0)
    total_price: Float(required=True, min_value=0.0)

    @invariant.post
    def total_must_add_up(self):
        expected = round(self.items_price + self.tax_price + self.shipping_price - (self.discount_amount or 0.0), 2)
        if abs(self.total_price - expected) > 0.005:
            raise ValidationError({"total_price": [f"Total {self.total_price} does not add up to {expected}"]})


@storefront.value_object(part_of="Order")
class PaymentResult:
    payment_id: String(max_length=255)
    status: String(max_length=50)
    update_time: String(max_length=50)
    email_address: String(max_length=254)


@storefront.value_object(part_of="Order")
class RefundInfo:
    reason: String(max_length=500)
    amount: Float(required=True, min_value=0.0)
    processed_at: DateTime(required=True)
    refund_id: String(required=True, max_length=50)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of a product line at the moment of purchase."""

    product_id: Identifier(required=True)
    name: String(required=True, max_length=200)
    image: String(max_length=500)
    price: Float(required=True, min_value=0.0)
    quantity: Integer(required=True, min_value=1)


@storefront.entity(part_of="Order")
class StatusChange:
    status: String(choices=OrderStatus, required=True)
    changed_at: DateTime(required=True)
    note: String(max_length=500)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number: String(required=True, max_length=20, unique=True)
    user_id: Identifier(required=True)
    items: HasMany(OrderItem)
    shipping_address: ValueObject(ShippingAddress, required=True)
    payment_method: String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    payment_result: ValueObject(PaymentResult)
    pricing: ValueObject(OrderPricing, required=True)
    coupon_code: String(max_length=50)
    is_paid: Boolean(default=False)
    paid_at: DateTime()
    is_delivered: Boolean(default=False)
    delivered_at: DateTime()
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    status_history: HasMany(StatusChange)
    tracking_number: String(max_length=100)
    estimated_delivery: DateTime()
    notes: Text()
    refund_info: ValueObject(RefundInfo)
    created_at: DateTime(default=_utcnow)
    updated_at: DateTime(default=_utcnow)

    @invariant.post
    def must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["No order items"]})

    @invariant.post
    def items_price_matches_lines(self):
        if self.pricing is None:
            return
        expected = round(sum(item.price * item.quantity for item in self.items), 2)
        if abs(self.pricing.items_price - expected) > 0.005:
            raise ValidationError({"items_price": [f"Items price must equal the line total {expected}"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        lines,
        shipping_address,
        pricing,
        payment_method=PaymentMethod.CASH_ON_DELIVERY.value,
        coupon_code=None,
        notes=None,
        order_number=None,
    ):
        """Create a Pending order from snapshot ``lines`` and precomputed ``pricing``.

        Args:
            lines: List of dicts with product_id, name, image, price, quantity.
            shipping_address: Dict with the ShippingAddress fields.
            pricing: Dict with the OrderPricing fields.
        """
        now = _utcnow()
        order = cls(
            order_number=order_number or generate_order_number(now),
            user_id=str(user_id),
            items=[OrderItem(**line) for line in lines],
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method or PaymentMethod.CASH_ON_DELIVERY.value,
            pricing=OrderPricing(**pricing),
            coupon_code=coupon_code,
            notes=notes,
            status=OrderStatus.PENDING.value,
            status_history=[
                StatusChange(
                    status=OrderStatus.PENDING.value,
                    changed_at=now,
                    note=_status_note(OrderStatus.PENDING.value),
                )
            ],
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                user_id=str(user_id),
                item_count=sum(line["quantity"] for line in lines),
                total_price=order.pricing.total_price,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status machine
    # -------------------------------------------------------------------
    def change_status(self, new_status, note=None, refund_reason=None, refund_amount=None):
        """Move to ``new_status`` and record it; a no-op if already there."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Invalid status: {new_status}"]}) from None

        current = OrderStatus(self.status)
        if target == current:
            return False
        if target not in _ALLOWED_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move order from {current.value} to {target.value}"]})

        now = _utcnow()
        if target == OrderStatus.REFUNDED:
            self._record_refund(refund_reason, refund_amount, now)

        self.status = target.value
        self.add_status_history(
            StatusChange(status=target.value, changed_at=now, note=note or _status_note(target.value))
        )
        self.updated_at = now

        if target == OrderStatus.SHIPPED and self.estimated_delivery is None:
            self.estimated_delivery = now + SHIPPING_ESTIMATE
        if target == OrderStatus.DELIVERED:
            self.is_delivered = True
            self.delivered_at = now
            self.raise_(
                OrderDelivered(order_id=self.id, order_number=self.order_number, delivered_at=now)
            )

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    def _record_refund(self, reason, amount, now):
        amount = self.pricing.total_price if amount is None else amount
        if amount > self.pricing.total_price:
            raise ValidationError({"refund_amount": ["Refund amount cannot exceed the order total"]})

        refund_id = f"REF-{self.order_number}"
        self.refund_info = RefundInfo(reason=reason, amount=amount, processed_at=now, refund_id=refund_id)
        self.raise_(
            OrderRefunded(
                order_id=self.id,
                order_number=self.order_number,
                refund_id=refund_id,
                amount=amount,
                reason=reason,
            )
        )

    def update_tracking(self, tracking_number=None, notes=None):
        if tracking_number is not None:
            self.tracking_number = tracking_number
        if notes is not None:
            self.notes = notes
        self.updated_at = _utcnow()

    # -------------------------------------------------------------------
    # Payment and delivery
    # -------------------------------------------------------------------
    def mark_paid(self, payment_id=None, status=None, update_time=None, email_address=None):
        if self.is_paid:
            raise ValidationError({"is_paid": ["Order is already paid"]})

        now = _utcnow()
        self.is_paid = True
        self.paid_at = now
        self.payment_result = PaymentResult(
            payment_id=payment_id,
            status=status,
            update_time=update_time,
            email_address=email_address,
        )
        self.change_status(OrderStatus.CONFIRMED.value)
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=self.id,
                order_number=self.order_number,
                payment_id=payment_id,
                amount=self.pricing.total_price,
                paid_at=now,
            )
        )

    def mark_delivered(self):
        self.change_status(OrderStatus.DELIVERED.value)
