"""
Actor roles and identity.

The auth layer verifies identity; the kernel receives an ``Actor`` and
treats it as already trusted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class ActorRole(str, Enum):
    """Fixed set of role claims issued by the auth layer."""

    ADMIN = "admin"
    PRINCIPAL = "principal"
    EMPLOYEE = "employee"
    CLIENT = "client"
    PROCUREMENT = "procurement"
    ACCOUNTANT = "accountant"
    HR = "hr"

    @classmethod
    def parse(cls, value: str | ActorRole) -> ActorRole:
        """Parse a role claim; the legacy spelling "principle" maps to PRINCIPAL."""
        if isinstance(value, ActorRole):
            return value
        normalized = value.strip().lower()
        if normalized == "principle":
            return cls.PRINCIPAL
        return cls(normalized)


# Roles held by studio staff (everyone except the client portal).
STAFF_ROLES: frozenset[ActorRole] = frozenset(set(ActorRole) - {ActorRole.CLIENT})

# Role claim that stands for every member of STAFF_ROLES in permission grants.
STAFF_ALIAS = "staff"


def expand_roles(values: Iterable[str | ActorRole]) -> tuple[ActorRole, ...]:
    """Parse role claims, expanding ``"staff"`` to ``STAFF_ROLES``; order kept, duplicates dropped."""
    roles: list[ActorRole] = []
    for value in values:
        if isinstance(value, str) and value.strip().lower() == STAFF_ALIAS:
            expanded = [r for r in ActorRole if r in STAFF_ROLES]
        else:
            expanded = [ActorRole.parse(value)]
        roles.extend(r for r in expanded if r not in roles)
    return tuple(roles)


@dataclass(frozen=True)
class Actor:
    """Verified identity performing an action."""

    actor_id: str
    role: ActorRole

    def __post_init__(self) -> None:
        if not self.actor_id:
            raise ValueError("actor_id cannot be empty")
        object.__setattr__(self, "role", ActorRole.parse(self.role))
