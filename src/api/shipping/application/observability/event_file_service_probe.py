"""Protocol for event attachment service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EventFileServiceProbe(Protocol):
    """Domain probe for attachment operations."""

    def file_uploaded(self, file_id: str, event_id: str, size: int) -> None:
        """Record that an attachment was stored."""
        ...

    def file_rejected_too_large(self, event_id: str, size: int, limit: int) -> None:
        """Record that an upload exceeded the size limit."""
        ...

    def download_url_issued(self, file_id: str, expires_in: int) -> None:
        """Record that a signed download URL was handed out."""
        ...

    def file_deleted(self, file_id: str) -> None:
        """Record that an attachment was deleted."""
        ...

    def storage_delete_failed(self, file_id: str, error: str) -> None:
        """Record that blob removal failed while metadata was still deleted."""
        ...

    def storage_unavailable(self) -> None:
        """Record that an attachment operation was attempted without storage."""
        ...

    def with_context(self, context: ObservationContext) -> EventFileServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEventFileServiceProbe:
    """Default implementation of EventFileServiceProbe using structlog."""

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
    ) -> DefaultEventFileServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultEventFileServiceProbe(logger=self._logger, context=context)

    def file_uploaded(self, file_id: str, event_id: str, size: int) -> None:
        self._logger.info(
            "event_file_uploaded",
            file_id=file_id,
            event_id=event_id,
            size=size,
            **self._get_context_kwargs(),
        )

    def file_rejected_too_large(self, event_id: str, size: int, limit: int) -> None:
        self._logger.warning(
            "event_file_too_large",
            event_id=event_id,
            size=size,
            limit=limit,
            **self._get_context_kwargs(),
        )

    def download_url_issued(self, file_id: str, expires_in: int) -> None:
        self._logger.info(
            "event_file_download_url_issued",
            file_id=file_id,
            expires_in=expires_in,
            **self._get_context_kwargs(),
        )

    def file_deleted(self, file_id: str) -> None:
        self._logger.info(
            "event_file_deleted",
            file_id=file_id,
            **self._get_context_kwargs(),
        )

    def storage_delete_failed(self, file_id: str, error: str) -> None:
        self._logger.warning(
            "event_file_storage_delete_failed",
            file_id=file_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def storage_unavailable(self) -> None:
        self._logger.warning(
            "event_file_storage_unavailable",
            **self._get_context_kwargs(),
        )
