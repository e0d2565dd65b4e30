"""Profile registration — command and handler.

Sign-up itself happens at the authentication service; this records the
profile that the auth account's metadata (name, role, phone) describes.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.profile.profile import Profile


@marketplace.command(part_of="Profile")
class RegisterProfile:
    user_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    role = String(required=True, max_length=20)
    phone = String(max_length=20)
    has_smartphone = Boolean(default=True)
    bio = Text()
    avatar_url = String(max_length=500)


@marketplace.command_handler(part_of=Profile)
class RegisterProfileHandler:
    @handle(RegisterProfile)
    def register_profile(self, command):
        profile = Profile.register(
            user_id=command.user_id,
            name=command.name,
            role=command.role,
            phone=command.phone,
            has_smartphone=command.has_smartphone if command.has_smartphone is not None else True,
            bio=command.bio,
            avatar_url=command.avatar_url,
        )
        current_domain.repository_for(Profile).add(profile)
        return str(profile.id)
