"""Order creation: command and handler.

An order is created once per payment intent. Re-submitting a checkout for a
payment intent that already has an order returns the existing order.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class CreateOrder:
    payment_intent_id = String(required=True, max_length=255)
    customer_email = String(max_length=255)
    customer_name = String(max_length=255)
    customer_phone = String(max_length=50)
    team_name = String(max_length=255)
    sport = String(max_length=10)
    plaque_type = String(max_length=50)
    plaque_style = String(max_length=50)
    gift_packaging = Boolean(default=False)
    is_pre_order = Boolean(default=False)
    preview_url = String(max_length=1000)
    promo_code = String(max_length=100)
    subtotal = Float(required=True)
    discount_amount = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    total_amount = Float(required=True)
    currency = String(max_length=3, default="USD")
    shipping_address = Text()  # JSON: address dict


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            existing = repo.find_by_payment_intent(command.payment_intent_id)
            logger.info(
                "Order already exists for payment intent",
                order_id=str(existing.id),
                payment_intent_id=command.payment_intent_id,
            )
            return str(existing.id)
        except ObjectNotFoundError:
            pass

        shipping_address = None
        if command.shipping_address:
            shipping_address = (
                json.loads(command.shipping_address)
                if isinstance(command.shipping_address, str)
                else command.shipping_address
            )

        pricing = {
            "subtotal": command.subtotal,
            "discount_amount": command.discount_amount or 0.0,
            "shipping_cost": command.shipping_cost or 0.0,
            "total_amount": command.total_amount,
            "currency": (command.currency or "USD").upper(),
        }

        order = Order.create(
            payment_intent_id=command.payment_intent_id,
            pricing=pricing,
            customer_email=command.customer_email,
            customer_name=command.customer_name,
            customer_phone=command.customer_phone,
            team_name=command.team_name,
            sport=command.sport,
            plaque_type=command.plaque_type,
            plaque_style=command.plaque_style,
            gift_packaging=command.gift_packaging,
            is_pre_order=command.is_pre_order,
            preview_url=command.preview_url,
            promo_code=command.promo_code,
            shipping_address=shipping_address,
        )
        repo.add(order)
        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            payment_intent_id=order.payment_intent_id,
        )
        return str(order.id)
