"""Repository for the Order aggregate with partner and customer lookups."""

from datetime import datetime

from ledger.domain import ledger
from ledger.order.order import Order, PaymentStatus
from shared.persistence import filter_all, filter_page, find_or_none

NEWEST_FIRST = "-created_at"


@ledger.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id: str) -> Order | None:
        return find_or_none(self, order_id)

    def for_partner(self, partner_id: str) -> list[Order]:
        """Every order owned by the partner, newest first."""
        return filter_all(self, order_by=NEWEST_FIRST, partner_id=str(partner_id))

    def page_for_partner(self, partner_id: str, limit: int, offset: int = 0) -> list[Order]:
        return filter_page(self, offset=offset, limit=limit, order_by=NEWEST_FIRST, partner_id=str(partner_id))

    def for_customer_and_partner(self, customer_id: str, partner_id: str) -> list[Order]:
        return filter_all(self, order_by=NEWEST_FIRST, customer_id=str(customer_id), partner_id=str(partner_id))

    def paid_since(self, partner_id: str, since: datetime) -> list[Order]:
        return filter_all(
            self,
            order_by="created_at",
            partner_id=str(partner_id),
            payment_status=PaymentStatus.PAID.value,
            created_at__gte=since,
        )
