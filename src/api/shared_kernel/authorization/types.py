"""Authorization type definitions shared across bounded contexts.

Roles and permissions are plain enums so every context can reason about
access without importing IAM internals.
"""

from enum import StrEnum


class TenantRole(StrEnum):
    """Role a user holds within their organization."""

    OWNER = "owner"
    MEMBER = "member"


class Permission(StrEnum):
    """Operations guarded by the tenant access gate."""

    VIEW_SHIPMENTS = "view_shipments"
    MANAGE_SHIPMENTS = "manage_shipments"
    VIEW_MEMBERS = "view_members"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_INVITATIONS = "manage_invitations"


ROLE_PERMISSIONS: dict[TenantRole, frozenset[Permission]] = {
    TenantRole.OWNER: frozenset(Permission),
    TenantRole.MEMBER: frozenset(
        {
            Permission.VIEW_SHIPMENTS,
            Permission.MANAGE_SHIPMENTS,
            Permission.VIEW_MEMBERS,
        }
    ),
}


def permissions_for(role: TenantRole) -> frozenset[Permission]:
    """Return the permissions granted to a role.

    Example:
        >>> Permission.MANAGE_MEMBERS in permissions_for(TenantRole.MEMBER)
        False
    """
    return ROLE_PERMISSIONS.get(role, frozenset())
