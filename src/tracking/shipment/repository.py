"""Repository for the OrderTracking aggregate."""

from shared.persistence import filter_all, find_or_none, storage_guard
from tracking.domain import tracking
from tracking.shipment.tracking import OrderTracking

NEWEST_FIRST = "-created_at"


@tracking.repository(part_of=OrderTracking)
class OrderTrackingRepository:
    def find(self, tracking_id: str) -> OrderTracking | None:
        return find_or_none(self, tracking_id)

    def find_by_order(self, order_id: str) -> OrderTracking | None:
        with storage_guard("OrderTrackingRepository.find_by_order"):
            return self._dao.query.filter(order_id=str(order_id)).all().first

    def find_by_tracking_number(self, tracking_number: str) -> OrderTracking | None:
        with storage_guard("OrderTrackingRepository.find_by_tracking_number"):
            return self._dao.query.filter(tracking_number=tracking_number).all().first

    def for_partner(self, partner_id: str) -> list[OrderTracking]:
        return filter_all(self, order_by=NEWEST_FIRST, partner_id=str(partner_id))

    def everything(self) -> list[OrderTracking]:
        return filter_all(self, order_by=NEWEST_FIRST)

    def remove(self, shipment: OrderTracking) -> None:
        """Hard delete the tracking together with its status history."""
        with storage_guard("OrderTrackingRepository.remove"):
            shipment.discard_history()
            self.add(shipment)
            self._dao.delete(shipment)
