"""Domain events for the PartnerProfile aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from ledger.domain import ledger


@ledger.event(part_of="PartnerProfile")
class PartnerRegistered:
    """A seller was onboarded with its commission configuration."""

    __version__ = 1

    user_id = Identifier(required=True)
    store_name = String(required=True)
    contact_email = String(required=True)
    commission_rate = Float(required=True)
    registered_at = DateTime(required=True)


@ledger.event(part_of="PartnerProfile")
class CommissionRateChanged:
    """A partner's commission rate was reconfigured."""

    __version__ = 1

    user_id = Identifier(required=True)
    previous_rate = Float(required=True)
    commission_rate = Float(required=True)
    changed_at = DateTime(required=True)
