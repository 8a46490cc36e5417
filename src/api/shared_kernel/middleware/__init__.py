"""Shared request-scoped primitives.

The tenant context value object lives here so every bounded context can
accept it. Resolving it from a request is the IAM context's job.
"""

from shared_kernel.middleware.tenant_context import TenantContext

__all__ = ["TenantContext"]
