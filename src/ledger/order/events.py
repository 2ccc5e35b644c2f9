"""Domain events for the Order aggregate.

Events are immutable facts about order state changes. They feed the
notification handlers and, through the broker, other domains.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ledger.domain import ledger


@ledger.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order with a partner."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    partner_id = Identifier()
    total_amount = Float(required=True)
    currency = String(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderAssigned:
    """An unassigned order was handed to a partner."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    partner_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderPaid:
    """The order was paid from the partner's wallet."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    partner_id = Identifier(required=True)
    amount = Float(required=True)
    paid_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String()
    carrier = String()
    shipped_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderCompleted:
    """The order is complete and eligible for partner payout."""

    __version__ = 1

    order_id = Identifier(required=True)
    partner_id = Identifier()
    completed_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    partner_id = Identifier()
    reason = String(required=True)
    was_paid = Boolean(default=False)
    refund_amount = Float()
    cancelled_at = DateTime(required=True)


@ledger.event(part_of="Order")
class OrderPaidOut:
    """The partner's commission for this order was credited to their wallet."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    partner_id = Identifier(required=True)
    payout_amount = Float(required=True)
    paid_out_at = DateTime(required=True)
