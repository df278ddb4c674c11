"""
Role helpers.

Role names come from the database; only a handful of system roles carry
hard-coded behaviour. Every other role name is treated as technical staff.
Authorization decisions go through the capability table below instead of
comparing role strings at each call site.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, List


class SystemRole(str, enum.Enum):
    CITIZEN = "Citizen"
    ADMINISTRATOR = "Administrator"
    PUBLIC_RELATIONS_OFFICER = "Municipal Public Relations Officer"
    EXTERNAL_MAINTAINER = "External Maintainer"
    DEPARTMENT_DIRECTOR = "Department Director"


class RoleKind(str, enum.Enum):
    CITIZEN = "citizen"
    ADMINISTRATOR = "administrator"
    PUBLIC_RELATIONS = "public_relations"
    EXTERNAL = "external"
    TECHNICAL = "technical"


@dataclass(frozen=True)
class Capabilities:
    can_approve: bool = False
    can_view_pending: bool = False
    can_work_reports: bool = False
    can_delegate: bool = False
    can_view_delegations: bool = False
    can_comment_internally: bool = False
    is_external: bool = False

    def __or__(self, other: "Capabilities") -> "Capabilities":
        return Capabilities(
            can_approve=self.can_approve or other.can_approve,
            can_view_pending=self.can_view_pending or other.can_view_pending,
            can_work_reports=self.can_work_reports or other.can_work_reports,
            can_delegate=self.can_delegate or other.can_delegate,
            can_view_delegations=self.can_view_delegations or other.can_view_delegations,
            can_comment_internally=self.can_comment_internally or other.can_comment_internally,
            is_external=self.is_external or other.is_external,
        )


NO_CAPABILITIES = Capabilities()

# can_work_reports: may move any report it can see through In Progress /
# Suspended / Resolved. External maintainers only work reports delegated to them.
CAPABILITIES = {
    RoleKind.CITIZEN: NO_CAPABILITIES,
    RoleKind.ADMINISTRATOR: NO_CAPABILITIES,
    RoleKind.PUBLIC_RELATIONS: Capabilities(
        can_approve=True,
        can_view_pending=True,
        can_view_delegations=True,
        can_comment_internally=True,
    ),
    RoleKind.EXTERNAL: Capabilities(
        can_comment_internally=True,
        is_external=True,
    ),
    RoleKind.TECHNICAL: Capabilities(
        can_work_reports=True,
        can_delegate=True,
        can_view_delegations=True,
        can_comment_internally=True,
    ),
}

_KIND_BY_SYSTEM_ROLE = {
    SystemRole.CITIZEN.value: RoleKind.CITIZEN,
    SystemRole.ADMINISTRATOR.value: RoleKind.ADMINISTRATOR,
    SystemRole.PUBLIC_RELATIONS_OFFICER.value: RoleKind.PUBLIC_RELATIONS,
    SystemRole.EXTERNAL_MAINTAINER.value: RoleKind.EXTERNAL,
}


def role_kind(role_name: str) -> RoleKind:
    return _KIND_BY_SYSTEM_ROLE.get(role_name, RoleKind.TECHNICAL)


def get_user_role_names(user) -> List[str]:
    """All role names held by a user with its user_roles loaded."""
    names = []
    for user_role in getattr(user, "user_roles", None) or []:
        department_role = user_role.department_role
        role = department_role.role if department_role else None
        if role and role.name:
            names.append(role.name)
    return names


def user_has_role(user, role_name: str) -> bool:
    return role_name in get_user_role_names(user)


def capabilities_for_roles(role_names: Iterable[str]) -> Capabilities:
    merged = NO_CAPABILITIES
    for name in role_names:
        merged = merged | CAPABILITIES[role_kind(name)]
    return merged


def capabilities_for(user) -> Capabilities:
    return capabilities_for_roles(get_user_role_names(user))
