"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to organization, user and invitation
persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OrganizationRepositoryProbe(Protocol):
    """Domain probe for organization repository operations."""

    def organization_saved(self, organization_id: str, slug: str) -> None:
        """Record that an organization was successfully saved."""
        ...

    def duplicate_slug(self, slug: str) -> None:
        """Record that an insert collided on the slug constraint."""
        ...

    def with_context(self, context: ObservationContext) -> OrganizationRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str, organization_id: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_deleted(self, user_id: str, organization_id: str) -> None:
        """Record that a user was removed."""
        ...

    def duplicate_email(self, email: str) -> None:
        """Record that an insert collided on the email constraint."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class InvitationRepositoryProbe(Protocol):
    """Domain probe for invitation repository operations."""

    def invitation_saved(self, invitation_id: str, organization_id: str) -> None:
        """Record that an invitation was stored."""
        ...

    def invitation_accept_conflict(self, invitation_id: str) -> None:
        """Record that a conditional accept updated no rows."""
        ...

    def invitations_deleted(self, organization_id: str, count: int) -> None:
        """Record that invitations were removed."""
        ...

    def with_context(self, context: ObservationContext) -> InvitationRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultOrganizationRepositoryProbe:
    """Default implementation of OrganizationRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultOrganizationRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultOrganizationRepositoryProbe(logger=self._logger, context=context)

    def organization_saved(self, organization_id: str, slug: str) -> None:
        self._logger.info(
            "organization_saved",
            organization_id=organization_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def duplicate_slug(self, slug: str) -> None:
        self._logger.warning(
            "duplicate_organization_slug",
            slug=slug,
            **self._get_context_kwargs(),
        )


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: str, organization_id: str) -> None:
        self._logger.info(
            "user_saved",
            user_id=user_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str, organization_id: str) -> None:
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def duplicate_email(self, email: str) -> None:
        self._logger.warning(
            "duplicate_user_email",
            email=email,
            **self._get_context_kwargs(),
        )


class DefaultInvitationRepositoryProbe:
    """Default implementation of InvitationRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultInvitationRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultInvitationRepositoryProbe(logger=self._logger, context=context)

    def invitation_saved(self, invitation_id: str, organization_id: str) -> None:
        self._logger.info(
            "invitation_saved",
            invitation_id=invitation_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def invitation_accept_conflict(self, invitation_id: str) -> None:
        self._logger.warning(
            "invitation_accept_conflict",
            invitation_id=invitation_id,
            **self._get_context_kwargs(),
        )

    def invitations_deleted(self, organization_id: str, count: int) -> None:
        self._logger.info(
            "invitations_deleted",
            organization_id=organization_id,
            count=count,
            **self._get_context_kwargs(),
        )
