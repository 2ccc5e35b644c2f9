"""PartnerProfile aggregate: seller identity and commission configuration.

A partner is identified by its user id. The same id is carried on orders as
``partner_id`` and owns the partner's wallet, so a payout never has to
translate between profile ids and user ids.

The commission rate is required configuration: there is no fallback rate.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from ledger.domain import ledger
from ledger.partner.events import CommissionRateChanged, PartnerRegistered
from shared.money import to_money


class PartnerStatus(Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


@ledger.aggregate
class PartnerProfile:
    user_id = Identifier(identifier=True, required=True)
    store_name = String(required=True, max_length=255)
    store_slug = String(max_length=255)
    contact_email = String(required=True, max_length=254)
    contact_phone = String(max_length=50)
    commission_rate = Float(required=True, min_value=0.0, max_value=1.0)
    status = String(
        max_length=20,
        choices=PartnerStatus,
        default=PartnerStatus.ACTIVE.value,
    )
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(
        cls,
        user_id: str,
        store_name: str,
        contact_email: str,
        commission_rate: float,
        store_slug: str | None = None,
        contact_phone: str | None = None,
    ):
        now = datetime.now(UTC)
        profile = cls(
            user_id=user_id,
            store_name=store_name,
            store_slug=store_slug or store_name.lower().replace(" ", "-"),
            contact_email=contact_email,
            contact_phone=contact_phone,
            commission_rate=commission_rate,
            created_at=now,
            updated_at=now,
        )
        profile.raise_(
            PartnerRegistered(
                user_id=str(profile.user_id),
                store_name=store_name,
                contact_email=contact_email,
                commission_rate=commission_rate,
                registered_at=now,
            )
        )
        return profile

    def change_commission_rate(self, commission_rate: float) -> None:
        if commission_rate is None or not 0.0 <= commission_rate <= 1.0:
            raise ValidationError({"commission_rate": ["Commission rate must be between 0 and 1"]})

        previous = self.commission_rate
        now = datetime.now(UTC)
        self.commission_rate = commission_rate
        self.updated_at = now
        self.raise_(
            CommissionRateChanged(
                user_id=str(self.user_id),
                previous_rate=previous,
                commission_rate=commission_rate,
                changed_at=now,
            )
        )

    def commission_for(self, total_amount: float) -> float:
        """Partner earnings for an order total at the configured rate."""
        return to_money(total_amount * self.commission_rate)
