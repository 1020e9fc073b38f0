"""Payment confirmation: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order
from storefront.shared.errors import Forbidden

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class MarkOrderPaid:
    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    payment_id: String(max_length=255)
    status: String(max_length=50)
    update_time: String(max_length=50)
    email_address: String(max_length=254)


@storefront.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(MarkOrderPaid)
    def mark_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if str(order.user_id) != str(command.user_id):
            raise Forbidden("Not authorized to update this order")

        order.mark_paid(
            payment_id=command.payment_id,
            status=command.status,
            update_time=command.update_time,
            email_address=command.email_address,
        )
        repo.add(order)

        logger.info("Order paid", order_id=str(order.id), order_number=order.order_number)
        return str(order.id)
