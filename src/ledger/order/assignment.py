"""Order assignment: an administrator hands an unassigned order to a partner."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.order.order import Order
from shared.errors import NotFound

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Order")
class AssignOrderToPartner:
    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)


@ledger.command_handler(part_of=Order)
class OrderAssignmentHandler:
    @handle(AssignOrderToPartner)
    def assign_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        if order is None:
            raise NotFound("Order", command.order_id)

        order.assign_to(command.partner_id)
        repo.add(order)
        logger.info("Order assigned", order_id=str(order.id), partner_id=str(command.partner_id))
