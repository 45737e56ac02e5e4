"""Order confirmation template: sent when a payment succeeds."""

from html import escape


def _money(amount: float, currency: str = "USD") -> str:
    if currency.upper() == "USD":
        return f"${amount:,.2f}"
    return f"{amount:,.2f} {currency.upper()}"


def _address_lines(address: dict | None) -> list[str]:
    if not address:
        return []
    lines = [address["line1"]]
    if address.get("line2"):
        lines.append(address["line2"])
    city_line = address["city"]
    if address.get("state"):
        city_line += f", {address['state']}"
    lines.append(f"{city_line} {address['postal_code']}")
    lines.append(address.get("country") or "US")
    return lines


class OrderConfirmationTemplate:
    """Renders the confirmation email from the context built for an order.

    Expected context keys: customer_name, order_number, team_name,
    plaque_type, plaque_style, subtotal, discount_amount, total_amount,
    currency, gift_packaging, is_pre_order, estimated_delivery,
    shipping_address (dict or None), preview_url, order_url,
    customer_email.
    """

    notification_type = "OrderConfirmation"

    @staticmethod
    def subject(context: dict) -> str:
        return f"Order Confirmed #{context['order_number']} - Your {context['team_name']} Plaque"

    @staticmethod
    def render(context: dict) -> dict:
        currency = context.get("currency", "USD")
        discount = context.get("discount_amount") or 0.0
        address = _address_lines(context.get("shipping_address"))
        delivery_line = f"Your plaque will be carefully packaged and shipped within {context['estimated_delivery']}."

        # Plain text
        lines = [
            f"Hi {context['customer_name']},",
            "",
            f"Thank you for your order! We're excited to create your custom {context['team_name']} plaque.",
            "Your order has been received and payment confirmed.",
            "",
            f"Order Number: {context['order_number']}",
            f"Plaque: {context['plaque_type'].title()} ({context['plaque_style']})",
        ]
        if context.get("gift_packaging"):
            lines.append("Gift Packaging: Included")
        lines.append(f"Subtotal: {_money(context['subtotal'], currency)}")
        if discount > 0:
            lines.append(f"Discount: -{_money(discount, currency)}")
        lines.append(f"Total Paid: {_money(context['total_amount'], currency)}")
        if address:
            lines += ["", "Shipping to:", *address]
        lines += ["", delivery_line]
        if context.get("is_pre_order"):
            lines.append("Pre-order: Expected delivery in March 2025")
        lines += [
            "You'll receive tracking information once your order ships.",
            "",
            f"View your order: {context['order_url']}",
            "",
            "Questions? Reply to this email or contact support@rosterframe.com",
            "",
            "Thank you for choosing RosterFrame!",
        ]
        body = "\n".join(lines)

        # HTML
        rows = [
            f"<tr><td>Plaque</td><td>{escape(context['plaque_type'].title())} ({escape(context['plaque_style'])})</td></tr>",
        ]
        if context.get("gift_packaging"):
            rows.append("<tr><td>Gift Packaging</td><td>Included</td></tr>")
        rows.append(f"<tr><td>Subtotal</td><td>{escape(_money(context['subtotal'], currency))}</td></tr>")
        if discount > 0:
            rows.append(f"<tr><td>Discount</td><td>-{escape(_money(discount, currency))}</td></tr>")
        rows.append(
            f"<tr><td><strong>Total Paid</strong></td>"
            f"<td><strong>{escape(_money(context['total_amount'], currency))}</strong></td></tr>"
        )

        parts = [
            "<!DOCTYPE html>",
            "<html><body style=\"font-family: Arial, sans-serif; color: #333;\">",
            "<h1>Order Confirmed!</h1>",
            f"<p>Hi {escape(context['customer_name'])},</p>",
            f"<p>Thank you for your order! We're excited to create your custom "
            f"{escape(context['team_name'])} plaque. Your order has been received and payment confirmed.</p>",
            f"<p>Order Number: <strong>{escape(context['order_number'])}</strong></p>",
        ]
        if context.get("preview_url"):
            parts.append(
                f"<p><img src=\"{escape(context['preview_url'])}\" width=\"500\" "
                f"alt=\"{escape(context['team_name'])} Plaque Preview\"></p>"
            )
        parts.append(f"<table>{''.join(rows)}</table>")
        if address:
            parts.append(f"<h3>Shipping Address</h3><p>{'<br>'.join(escape(line) for line in address)}</p>")
        parts.append(f"<p>{escape(delivery_line)}</p>")
        if context.get("is_pre_order"):
            parts.append("<p><strong>Pre-order: Expected delivery in March 2025</strong></p>")
        parts += [
            "<p>You'll receive tracking information once your order ships.</p>",
            f"<p><a href=\"{escape(context['order_url'])}\">Track Your Order</a></p>",
            "<p>Have questions about your order? Reply to this email or contact us at "
            "<a href=\"mailto:support@rosterframe.com\">support@rosterframe.com</a></p>",
            f"<p style=\"font-size: 12px; color: #9ca3af;\">This email was sent to "
            f"{escape(context.get('customer_email') or '')} regarding order {escape(context['order_number'])}</p>",
            "</body></html>",
        ]

        return {
            "subject": OrderConfirmationTemplate.subject(context),
            "body": body,
            "html_body": "\n".join(parts),
        }
