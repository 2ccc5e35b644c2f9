"""Order cancellation and refund: command and handler.

Cancelling a paid order returns its total to the owning partner's wallet in
the same Unit of Work that flips the order to ``cancelled``.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.order.order import Order
from ledger.wallet.wallet import Wallet
from shared.errors import InvalidState, NotFound

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    partner_id = Identifier()
    reason = String(required=True, max_length=500)


@ledger.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.find(command.order_id)
        if order is None:
            raise NotFound("Order", command.order_id)
        if command.partner_id and not order.belongs_to(command.partner_id):
            raise InvalidState(
                "Order does not belong to this partner",
                field="partner_id",
                order_id=str(order.id),
                partner_id=str(command.partner_id),
            )

        refund_amount = order.cancel(reason=command.reason)
        if refund_amount > 0:
            wallet_repo = current_domain.repository_for(Wallet)
            wallet = wallet_repo.find_or_open(order.partner_id, currency=order.currency)
            wallet.credit_refund(
                order_id=str(order.id),
                order_number=order.order_number,
                amount=refund_amount,
                reason=command.reason,
                currency=order.currency,
            )
            wallet_repo.add(wallet)
        order_repo.add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            reason=command.reason,
            refund_amount=refund_amount,
        )
        return refund_amount
