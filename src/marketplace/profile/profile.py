"""Profile aggregate — the application-level record of a person using HerTrade.

A profile is distinct from the raw authentication identity (``user_id``):
the auth service owns credentials and sessions, the profile owns the role,
phone number and capability flags the marketplace reasons about.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.profile.events import ProfileRegistered, ProfileVerified


class Role(Enum):
    CLIENT = "client"
    SUPPLIER = "supplier"
    ADMIN = "admin"


def normalize_phone(number):
    """Strip separators so numbers typed with spaces or hyphens still match."""
    if number is None:
        return None
    return re.sub(r"[\s\-()]", "", number.strip())


@marketplace.aggregate
class Profile:
    user_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    phone = String(max_length=20)
    role = String(required=True, choices=Role)
    is_verified = Boolean(default=False)
    has_smartphone = Boolean(default=True)
    bio = Text()
    avatar_url = String(max_length=500)
    created_at = DateTime()

    @invariant.post
    def phone_must_be_well_formed(self):
        if self.phone and not re.match(r"^\+?\d{7,15}$", self.phone):
            raise ValidationError({"phone": [f"Invalid phone number: {self.phone!r}"]})

    @invariant.post
    def sms_only_profiles_need_a_phone(self):
        if not self.has_smartphone and not self.phone:
            raise ValidationError({"phone": ["A phone number is required for profiles without a smartphone"]})

    @classmethod
    def register(cls, user_id, name, role, phone=None, has_smartphone=True, bio=None, avatar_url=None):
        now = datetime.now(UTC)
        profile = cls(
            user_id=user_id,
            name=name,
            phone=normalize_phone(phone),
            role=role,
            has_smartphone=has_smartphone,
            bio=bio,
            avatar_url=avatar_url,
            created_at=now,
        )
        profile.raise_(
            ProfileRegistered(
                profile_id=str(profile.id),
                user_id=str(user_id),
                name=name,
                role=role,
                has_smartphone=has_smartphone,
                registered_at=now,
            )
        )
        return profile

    @property
    def is_supplier(self):
        return self.role == Role.SUPPLIER.value

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    def verify(self, admin_id):
        """Mark the profile as verified. Verifying twice is a no-op."""
        if self.is_verified:
            return

        self.is_verified = True
        self.raise_(
            ProfileVerified(
                profile_id=str(self.id),
                verified_by=str(admin_id),
                verified_at=datetime.now(UTC),
            )
        )
