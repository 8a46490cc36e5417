"""Tenant context value object for resolved tenant identification.

This module contains the pure value object that represents the caller of a
tenant-scoped operation. It is framework-agnostic and contains no business
logic, making it safe for the shared kernel.

The actual resolution logic (bearer token verification, user lookup) lives
in the IAM bounded context's dependency layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.authorization.types import TenantRole


@dataclass(frozen=True)
class TenantContext:
    """Resolved caller identity for the current request.

    Passed explicitly to every tenant-scoped service method so that
    organization filtering never depends on ambient state.

    Attributes:
        user_id: The authenticated user's identifier.
        organization_id: The organization every read and write is scoped to.
        role: The caller's role within that organization.
    """

    user_id: str
    organization_id: str
    role: TenantRole

    @property
    def is_owner(self) -> bool:
        """True when the caller owns the organization."""
        return self.role == TenantRole.OWNER
