"""Order confirmation email: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class MarkConfirmationEmailSent:
    order_id = Identifier(required=True)
    message_id = String(max_length=255)


@ordering.command_handler(part_of=Order)
class MarkConfirmationEmailSentHandler:
    @handle(MarkConfirmationEmailSent)
    def mark_confirmation_email_sent(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_confirmation_email_sent(message_id=command.message_id)
        repo.add(order)
