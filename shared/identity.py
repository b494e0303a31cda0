"""Caller identity used to filter project visibility."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable

__all__ = ["ELEVATED_ROLES", "Identity", "Role"]


class Role(str, Enum):
    EXECUTIVE_DIRECTOR = "vvgo-leader"
    VERIFIED_MEMBER = "vvgo-member"
    PRODUCTION_TEAM = "vvgo-teams"
    ANONYMOUS = "anonymous"


# Roles that may see unreleased projects.
ELEVATED_ROLES: FrozenSet[Role] = frozenset({Role.PRODUCTION_TEAM, Role.EXECUTIVE_DIRECTOR})


@dataclass(frozen=True, slots=True)
class Identity:
    """Role set of the requesting user."""

    roles: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(roles=frozenset({Role.ANONYMOUS.value}))

    @classmethod
    def with_roles(cls, roles: Iterable[str | Role]) -> "Identity":
        return cls(roles=frozenset(_role_value(role) for role in roles))

    def has_role(self, role: str | Role) -> bool:
        return _role_value(role) in self.roles

    def is_elevated(self) -> bool:
        return any(self.has_role(role) for role in ELEVATED_ROLES)


def _role_value(role: str | Role) -> str:
    return role.value if isinstance(role, Role) else str(role)
