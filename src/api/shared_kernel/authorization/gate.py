"""Tenant access gate.

Role-based checks performed before any tenant-scoped operation. Tenant
isolation itself is enforced by repositories filtering on the caller's
organization id; the gate only answers "may this role do that".
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared_kernel.authorization.exceptions import PermissionDeniedError
from shared_kernel.authorization.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from shared_kernel.authorization.types import Permission, permissions_for

if TYPE_CHECKING:
    from shared_kernel.middleware.tenant_context import TenantContext

_DENIAL_MESSAGES: dict[Permission, str] = {
    Permission.MANAGE_MEMBERS: "Organization owner access required",
    Permission.MANAGE_INVITATIONS: "Organization owner access required",
}


class TenantAccessGate:
    """Grants or denies permissions based on the caller's tenant role."""

    def __init__(self, probe: AuthorizationProbe | None = None) -> None:
        self._probe = probe or DefaultAuthorizationProbe()

    def allows(self, context: TenantContext, permission: Permission) -> bool:
        """Check a permission without raising."""
        granted = permission in permissions_for(context.role)
        self._probe.permission_checked(
            user_id=context.user_id,
            organization_id=context.organization_id,
            permission=permission.value,
            granted=granted,
        )
        return granted

    def require(self, context: TenantContext, permission: Permission) -> None:
        """Raise unless the caller holds ``permission``.

        Raises:
            PermissionDeniedError: If the caller's role lacks the permission
        """
        if not self.allows(context, permission):
            raise PermissionDeniedError(
                _DENIAL_MESSAGES.get(permission, "Permission denied"),
                permission=permission.value,
            )
