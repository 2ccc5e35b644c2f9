"""Partner payout: credit commission for a completed or delivered order.

The handler re-reads the order inside the caller's lock, checks eligibility,
credits the commission to the partner's wallet and flags the order as paid
out. Both aggregates are committed by the same Unit of Work, so a failure at
any step leaves neither the wallet nor the order changed.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.order.order import Order
from ledger.partner.partner import PartnerProfile
from ledger.wallet.wallet import Wallet
from shared.errors import InvalidState, NotFound

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Wallet")
class ProcessPayout:
    order_id = Identifier(required=True)


@ledger.command_handler(part_of=Wallet)
class PayoutHandler:
    @handle(ProcessPayout)
    def process_payout(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.find(command.order_id)
        if order is None:
            raise NotFound("Order", command.order_id)
        order.assert_payout_eligible()

        profile = current_domain.repository_for(PartnerProfile).find(order.partner_id)
        if profile is None:
            raise InvalidState(
                "Partner has no commission configuration",
                field="commission_rate",
                partner_id=str(order.partner_id),
            )
        earnings = profile.commission_for(order.total_amount)

        wallet_repo = current_domain.repository_for(Wallet)
        wallet = wallet_repo.find_or_open(order.partner_id, currency=order.currency)
        wallet.credit_commission(
            order_id=str(order.id),
            order_number=order.order_number,
            order_total=order.total_amount,
            commission_rate=profile.commission_rate,
            amount=earnings,
            currency=order.currency,
        )
        order.record_payout(earnings)

        wallet_repo.add(wallet)
        order_repo.add(order)

        logger.info(
            "Partner payout processed",
            order_id=str(order.id),
            partner_id=str(order.partner_id),
            commission_rate=profile.commission_rate,
            earnings=earnings,
            balance=wallet.balance,
        )
        return earnings
