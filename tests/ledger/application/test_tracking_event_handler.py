"""Tests for the Ledger's reaction to Tracking events.

Cross-domain events are delivered by the broker in production; here the
handler is invoked directly with the shared event contracts.
"""

from datetime import UTC, datetime

from protean import current_domain

from ledger import engine
from ledger.order.order import Order, OrderStatus
from ledger.order.tracking_events import TrackingOrderEventHandler
from shared.events.tracking import ShipmentDelivered, TrackingCreated, TrackingStatusUpdated

PARTNER = "partner-001"
EMAIL = "owner@brakeworld.example"


def _paid_order():
    engine.register_partner(PARTNER, "Brake World", EMAIL, 0.15)
    engine.deposit_funds(PARTNER, 100.0)
    order_id = engine.place_order(
        "cust-001",
        [{"product_id": "prod-1", "quantity": 1, "unit_price": 100.0}],
        partner_id=PARTNER,
    )
    engine.charge_wallet(order_id, PARTNER)
    return order_id


def _order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


def _created(order_id):
    return TrackingCreated(
        tracking_id="trk-001",
        order_id=order_id,
        tracking_number="1Z999AA10123456784",
        carrier="UPS",
        partner_id=PARTNER,
        created_at=datetime.now(UTC),
    )


def _delivered(order_id):
    return ShipmentDelivered(
        tracking_id="trk-001",
        order_id=order_id,
        tracking_number="1Z999AA10123456784",
        partner_id=PARTNER,
        actual_delivery=datetime(2026, 3, 14, 15, 0, tzinfo=UTC),
    )


class TestTrackingCreated:
    def test_paid_order_moves_to_shipped(self):
        order_id = _paid_order()

        TrackingOrderEventHandler().on_tracking_created(_created(order_id))

        order = _order(order_id)
        assert order.status == OrderStatus.SHIPPED.value
        assert order.tracking_number == "1Z999AA10123456784"
        assert order.carrier == "UPS"

    def test_unpaid_order_is_left_alone(self):
        engine.register_partner(PARTNER, "Brake World", EMAIL, 0.15)
        order_id = engine.place_order(
            "cust-001",
            [{"product_id": "prod-1", "quantity": 1, "unit_price": 10.0}],
            partner_id=PARTNER,
        )

        TrackingOrderEventHandler().on_tracking_created(_created(order_id))

        assert _order(order_id).status == OrderStatus.PENDING.value

    def test_unknown_order_is_ignored(self):
        TrackingOrderEventHandler().on_tracking_created(_created("missing-order"))


class TestStatusUpdated:
    def test_partner_receives_shipping_update(self, fake_email):
        order_id = _paid_order()

        TrackingOrderEventHandler().on_status_updated(
            TrackingStatusUpdated(
                tracking_id="trk-001",
                order_id=order_id,
                tracking_number="1Z999AA10123456784",
                partner_id=PARTNER,
                previous_status="shipped",
                status="in_transit",
                location="Memphis, TN",
                updated_at=datetime.now(UTC),
            )
        )

        (email,) = fake_email.sent_to(EMAIL)
        assert "In Transit" in email["subject"]
        assert "Memphis, TN" in email["body"]


class TestShipmentDelivered:
    def test_shipped_order_moves_to_delivered_and_becomes_payable(self, fake_email):
        order_id = _paid_order()
        handler = TrackingOrderEventHandler()
        handler.on_tracking_created(_created(order_id))

        handler.on_shipment_delivered(_delivered(order_id))

        assert _order(order_id).status == OrderStatus.DELIVERED.value
        assert engine.process_payout(order_id) == 15.0
        assert any("2026-03-14" in email["body"] for email in fake_email.sent_to(EMAIL))

    def test_partner_lookup_falls_back_to_order(self, fake_email):
        order_id = _paid_order()
        event = ShipmentDelivered(
            tracking_id="trk-001",
            order_id=order_id,
            tracking_number="1Z999AA10123456784",
            actual_delivery=datetime.now(UTC),
        )

        TrackingOrderEventHandler().on_shipment_delivered(event)

        assert _order(order_id).status == OrderStatus.DELIVERED.value
        assert len(fake_email.sent_to(EMAIL)) == 1
