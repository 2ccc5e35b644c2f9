"""Partner onboarding commands and their handler."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.partner.partner import PartnerProfile
from shared.errors import InvalidState, NotFound


@ledger.command(part_of="PartnerProfile")
class RegisterPartner:
    user_id = Identifier(required=True)
    store_name = String(required=True, max_length=255)
    store_slug = String(max_length=255)
    contact_email = String(required=True, max_length=254)
    contact_phone = String(max_length=50)
    commission_rate = Float(required=True, min_value=0.0, max_value=1.0)


@ledger.command(part_of="PartnerProfile")
class UpdateCommissionRate:
    user_id = Identifier(required=True)
    commission_rate = Float(required=True, min_value=0.0, max_value=1.0)


@ledger.command_handler(part_of=PartnerProfile)
class PartnerRegistrationHandler:
    @handle(RegisterPartner)
    def register_partner(self, command):
        repo = current_domain.repository_for(PartnerProfile)
        if repo.find(command.user_id) is not None:
            raise InvalidState("Partner is already registered", field="user_id", user_id=str(command.user_id))

        profile = PartnerProfile.register(
            user_id=command.user_id,
            store_name=command.store_name,
            store_slug=command.store_slug,
            contact_email=command.contact_email,
            contact_phone=command.contact_phone,
            commission_rate=command.commission_rate,
        )
        repo.add(profile)
        return str(profile.user_id)

    @handle(UpdateCommissionRate)
    def update_commission_rate(self, command):
        repo = current_domain.repository_for(PartnerProfile)
        profile = repo.find(command.user_id)
        if profile is None:
            raise NotFound("PartnerProfile", command.user_id)
        profile.change_commission_rate(command.commission_rate)
        repo.add(profile)
