"""Tracking domain load test scenarios."""

import uuid

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import status_update, tracking_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShipmentState


class ShipmentJourney(SequentialTaskSet):
    """Create -> In Transit -> Out for Delivery -> Delivered -> Backward update (409).

    Generates events: TrackingCreated, TrackingStatusUpdated (x3), ShipmentDelivered.
    """

    def on_start(self):
        self.state = ShipmentState(order_id=f"ord-lt-{uuid.uuid4().hex[:10]}")

    @task
    def create_tracking(self):
        with self.client.post(
            "/tracking",
            json=tracking_data(self.state.order_id),
            catch_response=True,
            name="POST /tracking",
        ) as resp:
            if resp.status_code == 201:
                self.state.tracking_id = resp.json()["tracking_id"]
            else:
                resp.failure(f"Create tracking failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _advance(self, status):
        with self.client.put(
            f"/tracking/{self.state.tracking_id}/status",
            json=status_update(status),
            catch_response=True,
            name=f"PUT /tracking/{{id}}/status ({status})",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Status update failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def in_transit(self):
        self._advance("in_transit")

    @task
    def out_for_delivery(self):
        self._advance("out_for_delivery")

    @task
    def delivered(self):
        self._advance("delivered")

    @task
    def backward_update_is_rejected(self):
        with self.client.put(
            f"/tracking/{self.state.tracking_id}/status",
            json=status_update("in_transit"),
            catch_response=True,
            name="PUT /tracking/{id}/status (backward)",
        ) as resp:
            if resp.status_code == 409:
                resp.success()
            else:
                resp.failure(f"Backward update returned {resp.status_code}, expected 409")

    @task
    def lookup(self):
        self.client.get(f"/tracking/orders/{self.state.order_id}", name="GET /tracking/orders/{id}")

    @task
    def done(self):
        self.interrupt()


class TrackingUser(HttpUser):
    wait_time = between(0.5, 2.0)
    tasks = [ShipmentJourney]
