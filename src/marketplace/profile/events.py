"""Domain events for the Profile aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Profile")
class ProfileRegistered:
    """A person signed up and received an application profile."""

    __version__ = "v1"

    profile_id = Identifier(required=True)
    user_id = Identifier(required=True)
    name = String(required=True)
    role = String(required=True)
    has_smartphone = Boolean(default=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Profile")
class ProfileVerified:
    """An admin confirmed the identity of a profile."""

    __version__ = "v1"

    profile_id = Identifier(required=True)
    verified_by = Identifier(required=True)
    verified_at = DateTime(required=True)
