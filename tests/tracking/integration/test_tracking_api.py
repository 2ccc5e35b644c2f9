"""Integration tests for the tracking endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain

from shared.http import register_error_handlers
from tracking.api import tracking_router
from tracking.shipment.tracking import OrderTracking


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(tracking_router)
    return TestClient(app)


def _create(client, order_id="ord-api", tracking_number="9400111899223197428490"):
    response = client.post(
        "/tracking",
        json={
            "order_id": order_id,
            "tracking_number": tracking_number,
            "carrier": "USPS",
            "partner_id": "partner-api",
            "admin_id": "admin-api",
        },
    )
    assert response.status_code == 201
    return response.json()["tracking_id"]


class TestCreateTrackingEndpoint:
    def test_create(self, client):
        tracking_id = _create(client)
        shipment = current_domain.repository_for(OrderTracking).get(tracking_id)
        assert shipment.carrier == "USPS"

    def test_second_tracking_for_order_conflicts(self, client):
        _create(client)
        response = client.post(
            "/tracking",
            json={"order_id": "ord-api", "tracking_number": "OTHER", "carrier": "UPS"},
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "InvalidState"

    def test_reused_tracking_number_conflicts(self, client):
        _create(client)
        response = client.post(
            "/tracking",
            json={"order_id": "ord-other", "tracking_number": "9400111899223197428490", "carrier": "USPS"},
        )
        assert response.status_code == 409
        assert response.json()["context"]["order_id"] == "ord-api"


class TestLookupEndpoints:
    def test_get_by_id_number_and_order(self, client):
        tracking_id = _create(client)

        assert client.get(f"/tracking/{tracking_id}").json()["tracking_number"] == "9400111899223197428490"
        assert client.get("/tracking/number/9400111899223197428490").json()["id"] == tracking_id
        assert client.get("/tracking/orders/ord-api").json()["id"] == tracking_id

    def test_missing_tracking_is_404(self, client):
        assert client.get("/tracking/missing").status_code == 404
        assert client.get("/tracking/number/missing").status_code == 404
        assert client.get("/tracking/orders/missing").status_code == 404

    def test_listings(self, client):
        _create(client)
        _create(client, order_id="ord-other", tracking_number="OTHER")

        assert len(client.get("/tracking").json()) == 2
        assert len(client.get("/tracking/partners/partner-api").json()) == 2
        assert client.get("/tracking/partners/nobody").json() == []


class TestStatusEndpoints:
    def test_forward_update(self, client):
        tracking_id = _create(client)

        response = client.put(f"/tracking/{tracking_id}/status", json={"status": "in_transit", "location": "Denver, CO"})

        assert response.status_code == 200
        assert response.json() == {"status": "in_transit"}
        updates = client.get(f"/tracking/{tracking_id}").json()["updates"]
        assert updates[0]["location"] == "Denver, CO"

    def test_backward_update_conflicts(self, client):
        tracking_id = _create(client)
        client.put(f"/tracking/{tracking_id}/status", json={"status": "delivered"})

        response = client.put(f"/tracking/{tracking_id}/status", json={"status": "in_transit"})

        assert response.status_code == 409
        body = response.json()
        assert body["kind"] == "InvalidTransition"
        assert body["context"] == {"current": "delivered", "target": "in_transit"}

    def test_unknown_status_is_bad_request(self, client):
        tracking_id = _create(client)
        response = client.put(f"/tracking/{tracking_id}/status", json={"status": "teleported"})
        assert response.status_code == 400

    def test_estimated_delivery(self, client):
        tracking_id = _create(client)
        response = client.put(
            f"/tracking/{tracking_id}/estimated-delivery",
            json={"estimated_delivery": "2026-11-02T17:00:00+00:00"},
        )
        assert response.status_code == 200
        assert client.get(f"/tracking/{tracking_id}").json()["estimated_delivery"].startswith("2026-11-02")


class TestDeleteEndpoint:
    def test_delete(self, client):
        tracking_id = _create(client)

        assert client.delete(f"/tracking/{tracking_id}").status_code == 204
        assert client.get(f"/tracking/{tracking_id}").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete("/tracking/missing").status_code == 404
