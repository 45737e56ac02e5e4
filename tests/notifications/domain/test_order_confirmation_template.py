"""Tests for the order confirmation email template."""

import pytest
from notifications.templates import get_template
from notifications.templates.order_confirmation import OrderConfirmationTemplate


def _context(**overrides):
    context = {
        "customer_name": "Sam Fan",
        "customer_email": "fan@example.com",
        "order_number": "RF-250115-ABC123",
        "team_name": "Wolves",
        "plaque_type": "wood",
        "plaque_style": "classic",
        "subtotal": 149.99,
        "discount_amount": 0.0,
        "total_amount": 149.99,
        "currency": "USD",
        "gift_packaging": False,
        "is_pre_order": False,
        "estimated_delivery": "7-10 business days",
        "shipping_address": None,
        "preview_url": None,
        "order_url": "http://localhost:3000/order-success?payment_intent=pi_1",
    }
    context.update(overrides)
    return context


class TestRegistry:
    def test_lookup(self):
        assert get_template("OrderConfirmation") is OrderConfirmationTemplate

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            get_template("ReviewPrompt")


class TestRender:
    def test_subject(self):
        content = OrderConfirmationTemplate.render(_context())
        assert content["subject"] == "Order Confirmed #RF-250115-ABC123 - Your Wolves Plaque"

    def test_text_body(self):
        body = OrderConfirmationTemplate.render(_context())["body"]
        assert body.startswith("Hi Sam Fan,")
        assert "Order Number: RF-250115-ABC123" in body
        assert "Plaque: Wood (classic)" in body
        assert "Total Paid: $149.99" in body
        assert "within 7-10 business days" in body
        assert "Discount" not in body

    def test_discount_line(self):
        body = OrderConfirmationTemplate.render(_context(discount_amount=20.0, total_amount=129.99))["body"]
        assert "Discount: -$20.00" in body
        assert "Total Paid: $129.99" in body

    def test_non_usd_amounts(self):
        body = OrderConfirmationTemplate.render(_context(currency="CAD"))["body"]
        assert "Total Paid: 149.99 CAD" in body

    def test_pre_order(self):
        content = OrderConfirmationTemplate.render(_context(is_pre_order=True, estimated_delivery="March 2025"))
        assert "Pre-order: Expected delivery in March 2025" in content["body"]
        assert "Pre-order" in content["html_body"]

    def test_gift_packaging(self):
        assert "Gift Packaging: Included" in OrderConfirmationTemplate.render(_context(gift_packaging=True))["body"]

    def test_shipping_address(self):
        address = {
            "line1": "1 Stadium Way",
            "line2": "Suite 4",
            "city": "Green Bay",
            "state": "WI",
            "postal_code": "54304",
            "country": "US",
        }
        body = OrderConfirmationTemplate.render(_context(shipping_address=address))["body"]
        assert "Shipping to:\n1 Stadium Way\nSuite 4\nGreen Bay, WI 54304\nUS" in body

    def test_html_escapes_customer_values(self):
        html = OrderConfirmationTemplate.render(_context(customer_name="<script>x</script>"))["html_body"]
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_html_includes_preview_and_order_link(self):
        html = OrderConfirmationTemplate.render(_context(preview_url="https://cdn.example.com/p.png"))["html_body"]
        assert 'src="https://cdn.example.com/p.png"' in html
        assert "order-success?payment_intent=pi_1" in html
