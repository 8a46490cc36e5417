"""Protocol for shipment service observability.

Defines the interface for domain probes that capture application-level
domain events for shipment and travel event operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ShipmentServiceProbe(Protocol):
    """Domain probe for shipment service operations."""

    def shipment_created(
        self, shipment_id: str, organization_id: str, tracking_number: str
    ) -> None:
        """Record that a shipment was created."""
        ...

    def duplicate_tracking_number(
        self, organization_id: str, tracking_number: str
    ) -> None:
        """Record that a tracking number was already taken in an organization."""
        ...

    def shipment_updated(self, shipment_id: str, organization_id: str) -> None:
        """Record that a shipment's details were edited."""
        ...

    def shipment_not_found(self, shipment_id: str, organization_id: str) -> None:
        """Record that a shipment lookup missed (absent or cross-tenant)."""
        ...

    def shipment_tracked(self, tracking_number: str, found: bool) -> None:
        """Record a public tracking lookup."""
        ...

    def travel_event_added(self, shipment_id: str, event_id: str, status: str) -> None:
        """Record that an event was appended to a shipment."""
        ...

    def travel_event_updated(self, event_id: str, status_changed: bool) -> None:
        """Record that an event was edited."""
        ...

    def travel_event_deleted(self, event_id: str, shipment_id: str) -> None:
        """Record that an event was deleted."""
        ...

    def event_not_found(self, event_id: str, organization_id: str) -> None:
        """Record that an event lookup missed (absent or cross-tenant)."""
        ...

    def status_recalculated(
        self, shipment_id: str, previous_status: str, status: str
    ) -> None:
        """Record the outcome of a status recalculation."""
        ...

    def status_recalculation_failed(self, shipment_id: str, error: str) -> None:
        """Record that a best-effort status recalculation failed."""
        ...

    def attachment_cleanup_failed(self, event_id: str, error: str) -> None:
        """Record that attachment blobs could not be removed after an event delete."""
        ...

    def with_context(self, context: ObservationContext) -> ShipmentServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultShipmentServiceProbe:
    """Default implementation of ShipmentServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultShipmentServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultShipmentServiceProbe(logger=self._logger, context=context)

    def shipment_created(
        self, shipment_id: str, organization_id: str, tracking_number: str
    ) -> None:
        self._logger.info(
            "shipment_created",
            shipment_id=shipment_id,
            organization_id=organization_id,
            tracking_number=tracking_number,
            **self._get_context_kwargs(),
        )

    def duplicate_tracking_number(
        self, organization_id: str, tracking_number: str
    ) -> None:
        self._logger.warning(
            "duplicate_tracking_number",
            organization_id=organization_id,
            tracking_number=tracking_number,
            **self._get_context_kwargs(),
        )

    def shipment_updated(self, shipment_id: str, organization_id: str) -> None:
        self._logger.info(
            "shipment_updated",
            shipment_id=shipment_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def shipment_not_found(self, shipment_id: str, organization_id: str) -> None:
        self._logger.debug(
            "shipment_not_found",
            shipment_id=shipment_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def shipment_tracked(self, tracking_number: str, found: bool) -> None:
        self._logger.info(
            "shipment_tracked",
            tracking_number=tracking_number,
            found=found,
            **self._get_context_kwargs(),
        )

    def travel_event_added(self, shipment_id: str, event_id: str, status: str) -> None:
        self._logger.info(
            "travel_event_added",
            shipment_id=shipment_id,
            event_id=event_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def travel_event_updated(self, event_id: str, status_changed: bool) -> None:
        self._logger.info(
            "travel_event_updated",
            event_id=event_id,
            status_changed=status_changed,
            **self._get_context_kwargs(),
        )

    def travel_event_deleted(self, event_id: str, shipment_id: str) -> None:
        self._logger.info(
            "travel_event_deleted",
            event_id=event_id,
            shipment_id=shipment_id,
            **self._get_context_kwargs(),
        )

    def event_not_found(self, event_id: str, organization_id: str) -> None:
        self._logger.debug(
            "travel_event_not_found",
            event_id=event_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def status_recalculated(
        self, shipment_id: str, previous_status: str, status: str
    ) -> None:
        self._logger.info(
            "shipment_status_recalculated",
            shipment_id=shipment_id,
            previous_status=previous_status,
            status=status,
            **self._get_context_kwargs(),
        )

    def status_recalculation_failed(self, shipment_id: str, error: str) -> None:
        self._logger.error(
            "shipment_status_recalculation_failed",
            shipment_id=shipment_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def attachment_cleanup_failed(self, event_id: str, error: str) -> None:
        self._logger.warning(
            "attachment_cleanup_failed",
            event_id=event_id,
            error=error,
            **self._get_context_kwargs(),
        )
