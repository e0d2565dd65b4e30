"""Identity verification of profiles by an admin."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.profile.profile import Profile, Role
from marketplace.shared.context import load_actor


@marketplace.command(part_of="Profile")
class VerifyProfile:
    profile_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=Profile)
class VerifyProfileHandler:
    @handle(VerifyProfile)
    def verify_profile(self, command):
        actor = load_actor(command.actor_id, Role.ADMIN)

        repo = current_domain.repository_for(Profile)
        profile = repo.get(command.profile_id)
        profile.verify(admin_id=actor.profile_id)
        repo.add(profile)

        logger.info("Profile verified", profile_id=str(profile.id), verified_by=actor.profile_id)
