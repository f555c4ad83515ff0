"""Order status changes by purchaser and librarian: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from readreach.domain import readreach
from readreach.ordering.order import Order
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


@readreach.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@readreach.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@readreach.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel()
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id))

    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        order.advance(command.status)
        repo.add(order)
        logger.info("order_status_updated", order_id=str(order.id), previous_status=previous, status=order.status)
