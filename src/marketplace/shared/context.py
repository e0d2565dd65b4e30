"""Explicit actor context handed to every marketplace operation.

The web layer resolves the calling profile once per request and passes this
object down; nothing in the domain reads "the current user" from global state.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from marketplace.shared.errors import NotPermittedError


@dataclass(frozen=True)
class ActorContext:
    profile_id: str
    role: str
    is_verified: bool = False
    has_smartphone: bool = True

    @classmethod
    def from_profile(cls, profile):
        return cls(
            profile_id=str(profile.id),
            role=profile.role,
            is_verified=bool(profile.is_verified),
            has_smartphone=bool(profile.has_smartphone),
        )

    @classmethod
    def load(cls, profile_id):
        """Resolve a profile id into a context. Raises ObjectNotFoundError."""
        from marketplace.profile.profile import Profile

        return cls.from_profile(current_domain.repository_for(Profile).get(profile_id))

    def require_role(self, *roles):
        allowed = [getattr(role, "value", role) for role in roles]
        if self.role not in allowed:
            raise NotPermittedError(f"This action requires one of the roles: {', '.join(allowed)}")


def load_actor(actor_id, *roles):
    """Load the acting profile for a command handler and check its role."""
    actor = ActorContext.load(actor_id)
    if roles:
        actor.require_role(*roles)
    return actor
