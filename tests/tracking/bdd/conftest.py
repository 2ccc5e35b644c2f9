"""Shared BDD fixtures and step definitions for the Tracking domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from tracking import manager
from tracking.shipment.tracking import OrderTracking


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@given(
    parsers.cfparse('a tracking for order "{order_id}" with carrier "{carrier}"'),
    target_fixture="tracking_id",
)
def tracking_for_order(order_id, carrier):
    return manager.create_tracking(order_id=order_id, tracking_number="1Z999AA10123456784", carrier=carrier)


@then(parsers.cfparse('the tracking status is "{status}"'))
def tracking_status_is(tracking_id, status):
    assert current_domain.repository_for(OrderTracking).get(tracking_id).status == status


@then(parsers.cfparse("the tracking history has {count:d} update"))
@then(parsers.cfparse("the tracking history has {count:d} updates"))
def tracking_history_count(tracking_id, count):
    assert len(current_domain.repository_for(OrderTracking).get(tracking_id).updates) == count
