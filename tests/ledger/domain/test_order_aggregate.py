"""Tests for Order placement: totals, items, order number and events."""

import re

import pytest
from protean.exceptions import ValidationError

from ledger.order.events import OrderAssigned, OrderPlaced
from ledger.order.order import Order, OrderStatus, PaymentStatus, generate_order_number
from shared.errors import InvalidState


def _items():
    return [
        {"product_id": "prod-brake-pad", "title": "Ceramic Brake Pads", "sku": "BP-100", "quantity": 2, "unit_price": 35.5},
        {"product_id": "prod-rotor", "title": "Front Rotor", "sku": "RT-200", "quantity": 1, "unit_price": 29.0},
    ]


class TestOrderPlacement:
    def test_new_order_is_pending_and_unpaid(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.paid_out is False
        assert order.payout_amount is None

    def test_total_is_sum_of_line_items(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        assert order.total_amount == 100.0
        assert sorted(item.subtotal for item in order.items) == [29.0, 71.0]

    def test_total_is_rounded_to_cents(self):
        order = Order.place(
            customer_id="cust-001",
            items_data=[{"product_id": "prod-1", "quantity": 3, "unit_price": 0.1}],
        )
        assert order.total_amount == 0.3

    def test_order_number_format(self):
        order = Order.place(customer_id="cust-001", items_data=_items())
        assert re.fullmatch(r"ORD-\d{13}-[0-9A-F]{9}", order.order_number)

    def test_order_numbers_are_unique(self):
        assert generate_order_number() != generate_order_number()

    def test_empty_order_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(customer_id="cust-001", items_data=[])
        assert "items" in exc.value.messages

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(ValidationError):
            Order.place(
                customer_id="cust-001",
                items_data=[{"product_id": "prod-1", "quantity": 0, "unit_price": 10.0}],
            )

    def test_placement_raises_order_placed(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.total_amount == 100.0
        assert event.item_count == 2
        assert event.partner_id == "partner-001"


class TestOrderOwnership:
    def test_belongs_to_owning_partner(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        assert order.belongs_to("partner-001")
        assert not order.belongs_to("partner-002")

    def test_unassigned_order_belongs_to_nobody(self):
        order = Order.place(customer_id="cust-001", items_data=_items())
        assert not order.belongs_to("partner-001")


class TestPayoutInvariant:
    def test_payout_amount_requires_paid_out(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        with pytest.raises(ValidationError):
            order.payout_amount = 15.0

    def test_paid_out_requires_payout_amount(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        with pytest.raises(ValidationError):
            order.paid_out = True


class TestCurrency:
    def test_supported_currency_is_kept(self):
        order = Order.place(customer_id="cust-001", items_data=_items(), currency="EUR")
        assert order.currency == "EUR"

    def test_unsupported_currency_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(customer_id="cust-001", items_data=_items(), currency="XYZ")
        assert "currency" in exc.value.messages


class TestAssignment:
    def test_unassigned_order_is_assigned(self):
        order = Order.place(customer_id="cust-001", items_data=_items())
        order.assign_to("partner-009")

        assert order.partner_id == "partner-009"
        assert isinstance(order._events[-1], OrderAssigned)
        assert order._events[-1].partner_id == "partner-009"

    def test_assigned_order_keeps_its_partner(self):
        order = Order.place(customer_id="cust-001", partner_id="partner-001", items_data=_items())
        with pytest.raises(InvalidState, match="already assigned"):
            order.assign_to("partner-009")
        assert order.partner_id == "partner-001"

    def test_cancelled_order_cannot_be_assigned(self):
        order = Order.place(customer_id="cust-001", items_data=_items())
        order.cancel("duplicate")
        with pytest.raises(InvalidState):
            order.assign_to("partner-009")
        assert order.partner_id is None
