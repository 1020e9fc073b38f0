"""Back-office order handling: delivery and status commands with their handler."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class MarkOrderDelivered:
    order_id: Identifier(required=True)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id: Identifier(required=True)
    status: String(required=True, max_length=30)
    note: String(max_length=500)
    tracking_number: String(max_length=100)
    notes: Text()
    refund_reason: String(max_length=500)
    refund_amount: Float(min_value=0.0)


@storefront.command_handler(part_of=Order)
class OrderFulfillmentHandler:
    @handle(MarkOrderDelivered)
    def mark_delivered(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_delivered()
        repo.add(order)

        logger.info("Order delivered", order_id=str(order.id), order_number=order.order_number)
        return str(order.id)

    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        changed = order.change_status(
            command.status,
            note=command.note,
            refund_reason=command.refund_reason,
            refund_amount=command.refund_amount,
        )
        order.update_tracking(tracking_number=command.tracking_number, notes=command.notes)
        repo.add(order)

        if changed:
            logger.info(
                "Order status changed",
                order_id=str(order.id),
                order_number=order.order_number,
                previous_status=previous,
                new_status=order.status,
            )
        return str(order.id)
