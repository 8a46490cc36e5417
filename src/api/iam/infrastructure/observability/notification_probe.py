"""Domain probe for outbound e-mail notifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class NotificationProbe(Protocol):
    """Domain probe for notification delivery."""

    def notification_sent(self, kind: str, message_id: str | None) -> None:
        """Record that the provider accepted a message."""
        ...

    def notification_skipped(self, kind: str, reason: str) -> None:
        """Record that sending was disabled or unconfigured."""
        ...

    def notification_failed(self, kind: str, error: str) -> None:
        """Record that the provider rejected a message or was unreachable."""
        ...

    def with_context(self, context: ObservationContext) -> NotificationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultNotificationProbe:
    """Default implementation of NotificationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultNotificationProbe:
        """Create a new probe with observation context bound."""
        return DefaultNotificationProbe(logger=self._logger, context=context)

    def notification_sent(self, kind: str, message_id: str | None) -> None:
        self._logger.info(
            "notification_sent",
            kind=kind,
            message_id=message_id,
            **self._get_context_kwargs(),
        )

    def notification_skipped(self, kind: str, reason: str) -> None:
        self._logger.info(
            "notification_skipped",
            kind=kind,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def notification_failed(self, kind: str, error: str) -> None:
        self._logger.error(
            "notification_failed",
            kind=kind,
            error=error,
            **self._get_context_kwargs(),
        )
