"""Order aggregate (CQRS): a plaque purchase and its payment / fulfillment state.

An Order is created when the shopper starts checkout and a payment intent
exists at the provider. From then on its payment status moves only in
response to verified provider events; every change is written to an
append-only status history.

Payment State Machine:
    PENDING → SUCCEEDED | FAILED | REFUNDED | PARTIAL_REFUND
    FAILED → SUCCEEDED | REFUNDED | PARTIAL_REFUND
    SUCCEEDED → REFUNDED | PARTIAL_REFUND
    PARTIAL_REFUND → REFUNDED | PARTIAL_REFUND (larger refunded amount only)

    A refund can reach an order before the success event does; the refund
    still applies, and the late success is then skipped.

Fulfillment State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING | PROCESSING → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    CheckoutCompleted,
    ConfirmationEmailSent,
    FulfillmentStatusChanged,
    OrderCreated,
    OrderRefunded,
    PaymentFailed,
    PaymentSucceeded,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIAL_REFUND = "partial_refund"


class FulfillmentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class StatusType(Enum):
    PAYMENT = "payment"
    FULFILLMENT = "fulfillment"


class Actor(Enum):
    SYSTEM = "system"
    ADMIN = "admin"


_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {
        PaymentStatus.SUCCEEDED,
        PaymentStatus.FAILED,
        PaymentStatus.REFUNDED,
        PaymentStatus.PARTIAL_REFUND,
    },
    PaymentStatus.FAILED: {PaymentStatus.SUCCEEDED, PaymentStatus.REFUNDED, PaymentStatus.PARTIAL_REFUND},
    PaymentStatus.SUCCEEDED: {PaymentStatus.REFUNDED, PaymentStatus.PARTIAL_REFUND},
    PaymentStatus.PARTIAL_REFUND: {PaymentStatus.REFUNDED, PaymentStatus.PARTIAL_REFUND},
    PaymentStatus.REFUNDED: set(),  # Terminal
}

_FULFILLMENT_TRANSITIONS = {
    FulfillmentStatus.PENDING: {FulfillmentStatus.PROCESSING, FulfillmentStatus.CANCELLED},
    FulfillmentStatus.PROCESSING: {FulfillmentStatus.SHIPPED, FulfillmentStatus.CANCELLED},
    FulfillmentStatus.SHIPPED: {FulfillmentStatus.DELIVERED},
    FulfillmentStatus.DELIVERED: set(),  # Terminal
    FulfillmentStatus.CANCELLED: set(),  # Terminal
}


def generate_order_number(now: datetime) -> str:
    return f"RF-{now:%y%m%d}-{uuid4().hex[:6].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=2, default="US")


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Amounts in major currency units, locked at checkout."""

    subtotal = Float(default=0.0)
    discount_amount = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="USD")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class StatusHistoryEntry:
    """One row of the order's audit trail. Written once, never edited."""

    status_type = String(choices=StatusType, required=True)
    old_status = String(max_length=50)
    new_status = String(max_length=50, required=True)
    changed_by = String(choices=Actor, default=Actor.SYSTEM.value)
    notes = String(max_length=500)
    provider_event_id = String(max_length=255)
    recorded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    payment_intent_id = String(required=True, max_length=255, unique=True)
    checkout_session_id = String(max_length=255)
    stripe_customer_id = String(max_length=255)

    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    fulfillment_status = String(choices=FulfillmentStatus, default=FulfillmentStatus.PENDING.value)

    # Customer
    customer_email = String(max_length=255)
    customer_name = String(max_length=255)
    customer_phone = String(max_length=50)

    # Plaque configuration
    team_name = String(max_length=255)
    sport = String(max_length=10)
    plaque_type = String(max_length=50)
    plaque_style = String(max_length=50)
    gift_packaging = Boolean(default=False)
    is_pre_order = Boolean(default=False)
    preview_url = String(max_length=1000)
    promo_code = String(max_length=100)

    pricing = ValueObject(OrderPricing)
    amount_refunded = Float(default=0.0)
    shipping_address = ValueObject(ShippingAddress)

    status_history = HasMany(StatusHistoryEntry)

    paid_at = DateTime()
    confirmation_email_sent = Boolean(default=False)
    confirmation_email_sent_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        payment_intent_id,
        pricing,
        customer_email=None,
        customer_name=None,
        customer_phone=None,
        team_name=None,
        sport=None,
        plaque_type=None,
        plaque_style=None,
        gift_packaging=False,
        is_pre_order=False,
        preview_url=None,
        promo_code=None,
        shipping_address=None,
    ):
        """Create a pending order for a freshly created payment intent.

        Args:
            pricing: Dict with subtotal, discount_amount, shipping_cost,
                     total_amount, currency.
            shipping_address: Optional dict with line1, line2, city, state,
                              postal_code, country.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(now),
            payment_intent_id=payment_intent_id,
            payment_status=PaymentStatus.PENDING.value,
            fulfillment_status=FulfillmentStatus.PENDING.value,
            customer_email=customer_email,
            customer_name=customer_name,
            customer_phone=customer_phone,
            team_name=team_name,
            sport=sport,
            plaque_type=plaque_type,
            plaque_style=plaque_style,
            gift_packaging=bool(gift_packaging),
            is_pre_order=bool(is_pre_order),
            preview_url=preview_url,
            promo_code=promo_code,
            pricing=OrderPricing(**pricing),
            amount_refunded=0.0,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            confirmation_email_sent=False,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                payment_intent_id=payment_intent_id,
                customer_email=customer_email,
                customer_name=customer_name,
                team_name=team_name,
                total_amount=order.pricing.total_amount,
                currency=order.pricing.currency,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status history
    # -------------------------------------------------------------------
    def _record_status_change(
        self,
        status_type: StatusType,
        old_status: str | None,
        new_status: str,
        notes: str | None = None,
        changed_by: Actor = Actor.SYSTEM,
        provider_event_id: str | None = None,
        recorded_at: datetime | None = None,
    ) -> None:
        self.add_status_history(
            StatusHistoryEntry(
                status_type=status_type.value,
                old_status=old_status,
                new_status=new_status,
                changed_by=changed_by.value,
                notes=notes,
                provider_event_id=provider_event_id,
                recorded_at=recorded_at or datetime.now(UTC),
            )
        )

    def history_for(self, status_type: StatusType) -> list:
        entries = [e for e in (self.status_history or []) if e.status_type == status_type.value]
        return sorted(entries, key=lambda e: e.recorded_at)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def can_transition_payment(self, target: PaymentStatus) -> bool:
        current = PaymentStatus(self.payment_status)
        return target in _PAYMENT_TRANSITIONS.get(current, set())

    def _assert_can_transition_payment(self, target: PaymentStatus) -> None:
        if not self.can_transition_payment(target):
            raise ValidationError(
                {"payment_status": [f"Cannot transition from {self.payment_status} to {target.value}"]}
            )

    def record_checkout_completed(
        self,
        checkout_session_id: str,
        customer_email: str | None = None,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> None:
        """Copy customer details collected by the hosted checkout page."""
        now = datetime.now(UTC)
        self.checkout_session_id = checkout_session_id
        if customer_email:
            self.customer_email = customer_email
        if customer_name:
            self.customer_name = customer_name
        if customer_phone:
            self.customer_phone = customer_phone
        self.updated_at = now

        self.raise_(
            CheckoutCompleted(
                order_id=str(self.id),
                checkout_session_id=checkout_session_id,
                customer_email=self.customer_email,
                customer_name=self.customer_name,
                completed_at=now,
            )
        )

    def record_payment_success(
        self,
        stripe_customer_id: str | None = None,
        provider_event_id: str | None = None,
    ) -> None:
        self._assert_can_transition_payment(PaymentStatus.SUCCEEDED)

        now = datetime.now(UTC)
        old_status = self.payment_status
        self.payment_status = PaymentStatus.SUCCEEDED.value
        self.paid_at = now
        if stripe_customer_id:
            self.stripe_customer_id = stripe_customer_id
        self.updated_at = now

        self._record_status_change(
            StatusType.PAYMENT,
            old_status,
            PaymentStatus.SUCCEEDED.value,
            notes="Payment completed via Stripe webhook",
            provider_event_id=provider_event_id,
            recorded_at=now,
        )
        self.raise_(
            PaymentSucceeded(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                amount=self.pricing.total_amount,
                currency=self.pricing.currency,
                provider_event_id=provider_event_id,
                paid_at=now,
            )
        )

    def record_payment_failure(self, reason: str, provider_event_id: str | None = None) -> None:
        self._assert_can_transition_payment(PaymentStatus.FAILED)

        now = datetime.now(UTC)
        old_status = self.payment_status
        self.payment_status = PaymentStatus.FAILED.value
        self.updated_at = now

        self._record_status_change(
            StatusType.PAYMENT,
            old_status,
            PaymentStatus.FAILED.value,
            notes=f"Payment failed: {reason}",
            provider_event_id=provider_event_id,
            recorded_at=now,
        )
        self.raise_(
            PaymentFailed(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                reason=reason,
                provider_event_id=provider_event_id,
                failed_at=now,
            )
        )

    def refund_target(self, amount_refunded: float, charge_amount: float) -> PaymentStatus | None:
        """Status a refund of ``amount_refunded`` (cumulative) would lead to.

        None when the refund adds nothing beyond what is already recorded,
        i.e. the provider is replaying an event already applied.
        """
        if amount_refunded <= (self.amount_refunded or 0.0):
            return None
        if amount_refunded >= charge_amount:
            return PaymentStatus.REFUNDED
        return PaymentStatus.PARTIAL_REFUND

    def record_refund(
        self,
        amount_refunded: float,
        charge_amount: float,
        currency: str,
        provider_event_id: str | None = None,
    ) -> None:
        """Record a cumulative refunded amount reported for the charge."""
        target = self.refund_target(amount_refunded, charge_amount)
        if target is None:
            raise ValidationError({"amount_refunded": ["Refund does not exceed the amount already refunded"]})
        self._assert_can_transition_payment(target)

        now = datetime.now(UTC)
        old_status = self.payment_status
        refund_amount = amount_refunded - (self.amount_refunded or 0.0)
        self.payment_status = target.value
        self.amount_refunded = amount_refunded
        self.updated_at = now

        self._record_status_change(
            StatusType.PAYMENT,
            old_status,
            target.value,
            notes=f"Refund processed: {amount_refunded:.2f} {currency.upper()}",
            provider_event_id=provider_event_id,
            recorded_at=now,
        )
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                refund_amount=refund_amount,
                amount_refunded=amount_refunded,
                currency=currency.upper(),
                full_refund=target == PaymentStatus.REFUNDED,
                provider_event_id=provider_event_id,
                refunded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Confirmation email
    # -------------------------------------------------------------------
    def mark_confirmation_email_sent(self, message_id: str | None = None) -> None:
        if self.confirmation_email_sent:
            raise ValidationError({"confirmation_email_sent": ["Confirmation email already sent"]})
        if not self.customer_email:
            raise ValidationError({"customer_email": ["Order has no customer email"]})

        now = datetime.now(UTC)
        self.confirmation_email_sent = True
        self.confirmation_email_sent_at = now
        self.updated_at = now

        self.raise_(
            ConfirmationEmailSent(
                order_id=str(self.id),
                customer_email=self.customer_email,
                message_id=message_id,
                sent_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def update_fulfillment_status(
        self,
        new_status: str,
        notes: str | None = None,
        changed_by: Actor = Actor.ADMIN,
    ) -> None:
        try:
            target = FulfillmentStatus(new_status)
        except ValueError:
            raise ValidationError({"fulfillment_status": [f"Unknown fulfillment status: {new_status}"]}) from None

        current = FulfillmentStatus(self.fulfillment_status)
        if target not in _FULFILLMENT_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"fulfillment_status": [f"Cannot transition from {current.value} to {target.value}"]}
            )
        if target in (FulfillmentStatus.PROCESSING, FulfillmentStatus.SHIPPED) and self.payment_status not in (
            PaymentStatus.SUCCEEDED.value,
            PaymentStatus.PARTIAL_REFUND.value,
        ):
            raise ValidationError({"payment_status": ["Only paid orders can be produced or shipped"]})

        now = datetime.now(UTC)
        self.fulfillment_status = target.value
        self.updated_at = now

        self._record_status_change(
            StatusType.FULFILLMENT,
            current.value,
            target.value,
            notes=notes,
            changed_by=changed_by,
            recorded_at=now,
        )
        self.raise_(
            FulfillmentStatusChanged(
                order_id=str(self.id),
                old_status=current.value,
                new_status=target.value,
                changed_by=changed_by.value,
                notes=notes,
                changed_at=now,
            )
        )
