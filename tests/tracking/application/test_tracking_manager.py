"""Application tests for creating, updating and deleting shipment trackings."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain

from shared.errors import InvalidState, InvalidTransition, NotFound, StorageError
from tracking import manager
from tracking.shipment.repository import OrderTrackingRepository
from tracking.shipment.tracking import OrderTracking


def _create(order_id="ord-001", tracking_number="1Z999AA10123456784"):
    return manager.create_tracking(
        order_id=order_id,
        tracking_number=tracking_number,
        carrier="FedEx",
        shipping_method="express",
        partner_id="partner-001",
        admin_id="admin-001",
    )


def _shipment(tracking_id) -> OrderTracking:
    return current_domain.repository_for(OrderTracking).get(tracking_id)


class TestCreateTracking:
    def test_tracking_is_persisted(self):
        tracking_id = _create()

        shipment = _shipment(tracking_id)
        assert shipment.order_id == "ord-001"
        assert shipment.status == "shipped"
        assert shipment.shipping_method == "express"
        assert len(shipment.updates) == 1

    def test_one_tracking_per_order(self):
        tracking_id = _create()

        with pytest.raises(InvalidState, match="already has a tracking record") as exc:
            _create(tracking_number="OTHER")

        assert exc.value.context["tracking_id"] == tracking_id
        assert len(current_domain.repository_for(OrderTracking).everything()) == 1

    def test_tracking_number_belongs_to_one_order(self):
        _create(order_id="ord-001")

        with pytest.raises(InvalidState, match="already in use") as exc:
            _create(order_id="ord-002")

        assert exc.value.context["order_id"] == "ord-001"
        assert current_domain.repository_for(OrderTracking).find_by_order("ord-002") is None


class TestUpdateStatus:
    def test_shipment_progresses_to_delivered(self):
        tracking_id = _create()

        assert manager.update_status(tracking_id, "in_transit", location="Memphis, TN") == "in_transit"
        assert manager.update_status(tracking_id, "delivered", location="Austin, TX", admin_id="admin-002") == "delivered"

        shipment = _shipment(tracking_id)
        assert len(shipment.updates) == 3
        assert shipment.actual_delivery is not None
        assert shipment.latest_update().updated_by == "admin-002"

    def test_backward_update_fails_and_history_is_unchanged(self):
        tracking_id = _create()
        manager.update_status(tracking_id, "in_transit")
        manager.update_status(tracking_id, "delivered")

        with pytest.raises(InvalidTransition):
            manager.update_status(tracking_id, "in_transit")

        shipment = _shipment(tracking_id)
        assert shipment.status == "delivered"
        assert len(shipment.updates) == 3

    def test_unknown_tracking(self):
        with pytest.raises(NotFound):
            manager.update_status("missing", "in_transit")


class TestEstimatedDelivery:
    def test_estimate_is_persisted(self):
        tracking_id = _create()
        estimate = datetime.now(UTC) + timedelta(days=2)

        manager.update_estimated_delivery(tracking_id, estimate)

        assert _shipment(tracking_id).estimated_delivery == estimate

    def test_unknown_tracking(self):
        with pytest.raises(NotFound):
            manager.update_estimated_delivery("missing", datetime.now(UTC))


class TestDeleteTracking:
    def test_delete_removes_tracking_and_history(self):
        tracking_id = _create()
        manager.update_status(tracking_id, "in_transit")

        manager.delete_tracking(tracking_id)

        repo = current_domain.repository_for(OrderTracking)
        assert repo.find(tracking_id) is None
        assert repo.find_by_order("ord-001") is None

    def test_order_can_be_tracked_again_after_delete(self):
        manager.delete_tracking(_create())
        assert _create(tracking_number="RESHIP-1") is not None

    def test_unknown_tracking(self):
        with pytest.raises(NotFound):
            manager.delete_tracking("missing")


class TestStorageFailure:
    def test_failed_status_write_surfaces_storage_error(self, monkeypatch):
        tracking_id = _create()

        def _add(self, aggregate):
            raise ConnectionError("connection reset by peer")

        monkeypatch.setattr(OrderTrackingRepository, "add", _add)
        with pytest.raises(StorageError) as exc:
            manager.update_status(tracking_id, "in_transit", location="Memphis, TN")
        monkeypatch.undo()

        assert exc.value.operation == "UpdateTrackingStatus"
        shipment = _shipment(tracking_id)
        assert shipment.status == "shipped"
        assert len(shipment.updates) == 1

    def test_locks_are_released_after_each_operation(self):
        tracking_id = _create()
        manager.update_status(tracking_id, "in_transit")
        manager.delete_tracking(tracking_id)

        assert len(manager.locks) == 0
