"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state (no cross-user sharing).
State tracks the partner, order and tracking ids returned by creation
endpoints so follow-up operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class PartnerState:
    """A simulated partner: its wallet and the orders it has placed."""

    partner_id: str | None = None
    commission_rate: float = 0.1
    balance: float = 0.0
    order_ids: list[str] = field(default_factory=list)


@dataclass
class OrderState:
    order_id: str | None = None
    total: float = 0.0
    current_status: str = "pending"


@dataclass
class ShipmentState:
    tracking_id: str | None = None
    order_id: str | None = None
    current_status: str = "shipped"
