"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_payment_intent(self, payment_intent_id: str) -> Order:
        """Load the order created for ``payment_intent_id``.

        Raises ObjectNotFoundError if no order references the payment intent.
        """
        results = self._dao.query.filter(payment_intent_id=payment_intent_id).all().items
        if not results:
            raise ObjectNotFoundError(f"No order found for payment intent {payment_intent_id}")
        return self.get(results[0].id)
