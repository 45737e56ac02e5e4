"""Order fulfillment: command and handler.

Fulfillment is driven by staff from the admin views; each change is
validated against the fulfillment state machine and recorded in the
order's status history.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Actor, Order


@ordering.command(part_of="Order")
class UpdateFulfillmentStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    notes = String(max_length=500)


@ordering.command_handler(part_of=Order)
class UpdateFulfillmentHandler:
    @handle(UpdateFulfillmentStatus)
    def update_fulfillment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_fulfillment_status(command.status, notes=command.notes, changed_by=Actor.ADMIN)
        repo.add(order)
        logger.info("Fulfillment status updated", order_id=str(order.id), status=order.fulfillment_status)
        return order.fulfillment_status
