"""Order placement: command and handler."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.order.order import Order
from shared.money import DEFAULT_CURRENCY


@ledger.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    partner_id = Identifier()
    items = Text(required=True)  # JSON: list of item dicts
    currency = String(max_length=3, default=DEFAULT_CURRENCY)


@ledger.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        order = Order.place(
            customer_id=command.customer_id,
            partner_id=command.partner_id,
            items_data=items_data,
            currency=command.currency or DEFAULT_CURRENCY,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
