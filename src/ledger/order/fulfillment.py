"""Order fulfillment transitions: shipped, delivered, completed."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.order.order import Order
from shared.errors import NotFound


@ledger.command(part_of="Order")
class MarkOrderShipped:
    order_id = Identifier(required=True)
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)


@ledger.command(part_of="Order")
class MarkOrderDelivered:
    order_id = Identifier(required=True)


@ledger.command(part_of="Order")
class CompleteOrder:
    order_id = Identifier(required=True)


@ledger.command_handler(part_of=Order)
class OrderFulfillmentHandler:
    def _load(self, order_id):
        order = current_domain.repository_for(Order).find(order_id)
        if order is None:
            raise NotFound("Order", order_id)
        return order

    @handle(MarkOrderShipped)
    def mark_shipped(self, command):
        order = self._load(command.order_id)
        order.mark_shipped(tracking_number=command.tracking_number, carrier=command.carrier)
        current_domain.repository_for(Order).add(order)

    @handle(MarkOrderDelivered)
    def mark_delivered(self, command):
        order = self._load(command.order_id)
        order.mark_delivered()
        current_domain.repository_for(Order).add(order)

    @handle(CompleteOrder)
    def complete_order(self, command):
        order = self._load(command.order_id)
        order.complete()
        current_domain.repository_for(Order).add(order)
