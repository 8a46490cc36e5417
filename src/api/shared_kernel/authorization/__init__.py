"""Authorization primitives for tenant-scoped access control.

This module provides shared role and permission types and the tenant access
gate used by every bounded context.
"""

from shared_kernel.authorization.exceptions import PermissionDeniedError
from shared_kernel.authorization.gate import TenantAccessGate
from shared_kernel.authorization.types import (
    Permission,
    TenantRole,
    permissions_for,
)

__all__ = [
    "Permission",
    "PermissionDeniedError",
    "TenantAccessGate",
    "TenantRole",
    "permissions_for",
]
