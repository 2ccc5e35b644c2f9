"""Order payment from the partner's wallet balance."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.order.order import Order
from ledger.wallet.wallet import Wallet
from shared.errors import InvalidState, NotFound

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Order")
class PayOrderWithWallet:
    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)


@ledger.command_handler(part_of=Order)
class WalletPaymentHandler:
    @handle(PayOrderWithWallet)
    def pay_with_wallet(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.find(command.order_id)
        if order is None:
            raise NotFound("Order", command.order_id)
        if not order.belongs_to(command.partner_id):
            raise InvalidState(
                "Order does not belong to this partner",
                field="partner_id",
                order_id=str(order.id),
                partner_id=str(command.partner_id),
            )
        order.assert_payable()

        # Debit first: a short balance aborts before the order is touched
        wallet_repo = current_domain.repository_for(Wallet)
        wallet = wallet_repo.find_or_open(command.partner_id, currency=order.currency)
        if order.total_amount > 0:
            wallet.debit_order_payment(
                order_id=str(order.id),
                order_number=order.order_number,
                amount=order.total_amount,
                currency=order.currency,
            )
        order.record_wallet_payment()

        wallet_repo.add(wallet)
        order_repo.add(order)

        logger.info(
            "Order paid from wallet",
            order_id=str(order.id),
            partner_id=str(command.partner_id),
            amount=order.total_amount,
            balance=wallet.balance,
        )
        return wallet.balance
