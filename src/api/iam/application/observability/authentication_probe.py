"""Protocol for authentication observability.

Defines the interface for domain probes that capture signup, login and
session lookup events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for authentication operations."""

    def organization_signed_up(
        self, organization_id: str, user_id: str, slug: str
    ) -> None:
        """Record that a new organization and its owner were created."""
        ...

    def slug_collision(self, slug: str, attempt: int) -> None:
        """Record that signup lost a slug race and will retry."""
        ...

    def signup_rejected(self, email: str, reason: str) -> None:
        """Record that signup was refused."""
        ...

    def login_succeeded(self, user_id: str, organization_id: str) -> None:
        """Record a successful password login."""
        ...

    def login_failed(self, email: str, reason: str) -> None:
        """Record a failed login. The reason is logged, never returned."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe:
    """Default implementation of AuthenticationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def organization_signed_up(
        self, organization_id: str, user_id: str, slug: str
    ) -> None:
        self._logger.info(
            "organization_signed_up",
            organization_id=organization_id,
            user_id=user_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def slug_collision(self, slug: str, attempt: int) -> None:
        self._logger.warning(
            "organization_slug_collision",
            slug=slug,
            attempt=attempt,
            **self._get_context_kwargs(),
        )

    def signup_rejected(self, email: str, reason: str) -> None:
        self._logger.info(
            "signup_rejected",
            email=email,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def login_succeeded(self, user_id: str, organization_id: str) -> None:
        self._logger.info(
            "login_succeeded",
            user_id=user_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def login_failed(self, email: str, reason: str) -> None:
        self._logger.warning(
            "login_failed",
            email=email,
            reason=reason,
            **self._get_context_kwargs(),
        )
