"""Repository for the PartnerProfile aggregate."""

from ledger.domain import ledger
from ledger.partner.partner import PartnerProfile
from shared.persistence import find_or_none


@ledger.repository(part_of=PartnerProfile)
class PartnerProfileRepository:
    def find(self, user_id: str) -> PartnerProfile | None:
        return find_or_none(self, user_id)

    def contact_email_for(self, user_id: str) -> str | None:
        profile = self.find(user_id) if user_id else None
        return profile.contact_email if profile else None
