"""Dashboard roles and the rule-set perspective each one sees."""

from enum import Enum


class Perspective(Enum):
    """Which status state machine applies: admin's is coarser than staff's."""

    ADMIN = "Admin"
    STAFF = "Staff"


class Role(Enum):
    SUPER_ADMIN = "Super-admin"
    FULFILLMENT_ADMIN = "Fulfillment-Admin"
    FULFILLMENT_STAFF = "Fulfillment-Staff"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: "str | Role | None") -> "Role":
        """Map an auth role string to a Role. Unknown roles become OTHER."""
        if isinstance(value, Role):
            return value
        text = (value or "").strip()
        if text in _LEGACY_ROLE_NAMES:
            return _LEGACY_ROLE_NAMES[text]
        for role in cls:
            if role.value == text:
                return role
        return cls.OTHER

    @property
    def is_admin(self) -> bool:
        return self in (Role.SUPER_ADMIN, Role.FULFILLMENT_ADMIN)

    @property
    def is_staff(self) -> bool:
        return self is Role.FULFILLMENT_STAFF


# Older accounts still carry the misspelled role name
_LEGACY_ROLE_NAMES = {"Fullfillment-Admin": Role.FULFILLMENT_ADMIN}


def perspective_for(role: Role) -> Perspective:
    return Perspective.STAFF if role.is_staff else Perspective.ADMIN


def force_packing_for(role: Role) -> bool:
    """Whether mark-packed requests from this role bypass server-side checks."""
    return role in (Role.SUPER_ADMIN, Role.FULFILLMENT_ADMIN)
