"""Protocol for invitation and team management observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class InvitationServiceProbe(Protocol):
    """Domain probe for invitation workflow and team operations."""

    def invitation_created(
        self, invitation_id: str, organization_id: str, email: str
    ) -> None:
        """Record that an invitation was issued."""
        ...

    def invitation_rejected(self, organization_id: str, email: str, reason: str) -> None:
        """Record that an invitation could not be issued."""
        ...

    def invitation_resent(self, invitation_id: str, organization_id: str) -> None:
        """Record that an invitation email was sent again."""
        ...

    def invitation_cancelled(self, invitation_id: str, organization_id: str) -> None:
        """Record that a pending invitation was withdrawn."""
        ...

    def invitation_accepted(
        self, invitation_id: str, user_id: str, organization_id: str
    ) -> None:
        """Record that an invitation was redeemed and a user created."""
        ...

    def acceptance_refused(self, reason: str) -> None:
        """Record that a token could not be redeemed."""
        ...

    def notification_not_delivered(self, kind: str, error: str | None) -> None:
        """Record that an email attempt did not succeed."""
        ...

    def member_removed(self, user_id: str, organization_id: str) -> None:
        """Record that a member was removed from an organization."""
        ...

    def with_context(self, context: ObservationContext) -> InvitationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultInvitationServiceProbe:
    """Default implementation of InvitationServiceProbe using structlog."""

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
    ) -> DefaultInvitationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultInvitationServiceProbe(logger=self._logger, context=context)

    def invitation_created(
        self, invitation_id: str, organization_id: str, email: str
    ) -> None:
        self._logger.info(
            "invitation_created",
            invitation_id=invitation_id,
            organization_id=organization_id,
            email=email,
            **self._get_context_kwargs(),
        )

    def invitation_rejected(self, organization_id: str, email: str, reason: str) -> None:
        self._logger.info(
            "invitation_rejected",
            organization_id=organization_id,
            email=email,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def invitation_resent(self, invitation_id: str, organization_id: str) -> None:
        self._logger.info(
            "invitation_resent",
            invitation_id=invitation_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def invitation_cancelled(self, invitation_id: str, organization_id: str) -> None:
        self._logger.info(
            "invitation_cancelled",
            invitation_id=invitation_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def invitation_accepted(
        self, invitation_id: str, user_id: str, organization_id: str
    ) -> None:
        self._logger.info(
            "invitation_accepted",
            invitation_id=invitation_id,
            user_id=user_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def acceptance_refused(self, reason: str) -> None:
        self._logger.info(
            "invitation_acceptance_refused",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def notification_not_delivered(self, kind: str, error: str | None) -> None:
        self._logger.warning(
            "notification_not_delivered",
            kind=kind,
            error=error,
            **self._get_context_kwargs(),
        )

    def member_removed(self, user_id: str, organization_id: str) -> None:
        self._logger.info(
            "member_removed",
            user_id=user_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )
