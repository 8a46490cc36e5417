"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving the caller's tenant
context from a bearer token.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_context_resolved(
        self,
        user_id: str,
        organization_id: str,
        role: str,
    ) -> None:
        """Record that a request was bound to a tenant context."""
        ...

    def credentials_missing(self) -> None:
        """Record that a protected endpoint was called without a bearer token."""
        ...

    def token_rejected(self, reason: str) -> None:
        """Record that a bearer token failed verification."""
        ...

    def principal_inactive(self, user_id: str) -> None:
        """Record that a valid token referenced a removed user or inactive organization."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_context_resolved(
        self,
        user_id: str,
        organization_id: str,
        role: str,
    ) -> None:
        self._logger.debug(
            "tenant_context_resolved",
            user_id=user_id,
            organization_id=organization_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def credentials_missing(self) -> None:
        self._logger.info("tenant_credentials_missing", **self._get_context_kwargs())

    def token_rejected(self, reason: str) -> None:
        self._logger.warning(
            "tenant_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def principal_inactive(self, user_id: str) -> None:
        self._logger.warning(
            "tenant_principal_inactive",
            user_id=user_id,
            **self._get_context_kwargs(),
        )
