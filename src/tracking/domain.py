"""Tracking bounded context: Shipment Tracking for partner orders.

One OrderTracking per order, carrying the carrier details and an
append-only history of status updates. Status only moves forward through
processing → shipped → in_transit → out_for_delivery → delivered.
"""

from protean.domain import Domain

tracking = Domain(name="tracking")
