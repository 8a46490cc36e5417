"""Domain probe for Shipping repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ShipmentRepositoryProbe(Protocol):
    """Domain probe for shipment repository operations."""

    def shipment_saved(self, shipment_id: str, organization_id: str) -> None:
        """Record that a shipment row was written."""
        ...

    def duplicate_tracking_number(
        self, tracking_number: str, organization_id: str
    ) -> None:
        """Record that storage rejected a duplicate tracking number."""
        ...

    def shipment_locked(self, shipment_id: str) -> None:
        """Record that a shipment row lock was taken."""
        ...

    def travel_event_saved(self, event_id: str, shipment_id: str) -> None:
        """Record that a travel event row was written."""
        ...

    def travel_event_deleted(self, event_id: str) -> None:
        """Record that a travel event row was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> ShipmentRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultShipmentRepositoryProbe:
    """Default implementation of ShipmentRepositoryProbe using structlog."""

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
    ) -> DefaultShipmentRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultShipmentRepositoryProbe(logger=self._logger, context=context)

    def shipment_saved(self, shipment_id: str, organization_id: str) -> None:
        self._logger.debug(
            "shipment_saved",
            shipment_id=shipment_id,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def duplicate_tracking_number(
        self, tracking_number: str, organization_id: str
    ) -> None:
        self._logger.warning(
            "shipment_tracking_number_conflict",
            tracking_number=tracking_number,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def shipment_locked(self, shipment_id: str) -> None:
        self._logger.debug(
            "shipment_row_locked",
            shipment_id=shipment_id,
            **self._get_context_kwargs(),
        )

    def travel_event_saved(self, event_id: str, shipment_id: str) -> None:
        self._logger.debug(
            "travel_event_saved",
            event_id=event_id,
            shipment_id=shipment_id,
            **self._get_context_kwargs(),
        )

    def travel_event_deleted(self, event_id: str) -> None:
        self._logger.debug(
            "travel_event_row_deleted",
            event_id=event_id,
            **self._get_context_kwargs(),
        )
