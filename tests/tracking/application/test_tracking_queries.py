from shared.errors import StorageError
from tracking import manager, queries
from tracking.shipment.repository import OrderTrackingRepository


def _create(order_id, tracking_number, partner_id="partner-001"):
    return manager.create_tracking(
        order_id=order_id,
        tracking_number=tracking_number,
        carrier="DHL",
        partner_id=partner_id,
    )


def _failing(*args, **kwargs):
    raise StorageError("filter", TimeoutError("read timed out"))


class TestLookups:
    def test_by_tracking_number(self):
        tracking_id = _create("ord-001", "JD014600006281234567")
        view = queries.get_by_tracking_number("JD014600006281234567")
        assert view["id"] == tracking_id
        assert view["status_label"] == "Shipped"

    def test_by_order(self):
        tracking_id = _create("ord-001", "JD1")
        assert queries.get_by_order_id("ord-001")["id"] == tracking_id
        assert queries.get_by_order_id("ord-404") is None

    def test_history_is_newest_first(self):
        tracking_id = _create("ord-001", "JD1")
        manager.update_status(tracking_id, "in_transit", location="Leipzig")
        manager.update_status(tracking_id, "out_for_delivery", location="Berlin")

        updates = queries.get_tracking(tracking_id)["updates"]

        assert [u["status"] for u in updates] == ["out_for_delivery", "in_transit", "shipped"]
        assert all(u["tracking_id"] == tracking_id for u in updates)

    def test_missing_tracking(self):
        assert queries.get_tracking("missing") is None
        assert queries.get_by_tracking_number("missing") is None


class TestListings:
    def test_partner_listing_is_scoped(self):
        mine = _create("ord-001", "JD1")
        _create("ord-002", "JD2", partner_id="partner-002")

        assert [view["id"] for view in queries.list_partner_tracking("partner-001")] == [mine]

    def test_all_trackings(self):
        _create("ord-001", "JD1")
        _create("ord-002", "JD2", partner_id="partner-002")
        assert len(queries.list_all_tracking()) == 2

    def test_listings_span_every_stored_page(self, monkeypatch):
        monkeypatch.setattr("shared.persistence.PAGE_SIZE", 2)
        ids = [_create(f"ord-00{n}", f"JD{n}") for n in range(1, 4)]

        assert [view["id"] for view in queries.list_partner_tracking("partner-001")] == ids[::-1]
        assert len(queries.list_all_tracking()) == 3

    def test_listing_degrades_on_storage_failure(self, monkeypatch):
        _create("ord-001", "JD1")
        monkeypatch.setattr(OrderTrackingRepository, "everything", _failing)
        assert queries.list_all_tracking() == []
