"""Repository protocols (ports) for the Shipping bounded context.

Every tenant-scoped lookup takes the caller's organization id and returns
``None`` for rows owned by another organization. The only unscoped read is
``get_by_tracking_number``, which backs public tracking.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shipping.domain.aggregates import EventFile, Shipment, TravelEvent
from shipping.domain.value_objects import EventFileId, ShipmentId, TravelEventId


@runtime_checkable
class IShipmentRepository(Protocol):
    """Repository for Shipment aggregates and their travel events.

    Shipments are returned with ``travel_events`` loaded newest-first.
    Callers own the transaction; implementations only flush.
    """

    async def add(self, shipment: Shipment) -> None:
        """Insert a new shipment.

        Raises:
            DuplicateTrackingNumberError: If the organization already uses
                the tracking number
        """
        ...

    async def save(self, shipment: Shipment) -> None:
        """Persist descriptive fields and ``current_status`` of a shipment."""
        ...

    async def get_by_id(
        self,
        shipment_id: ShipmentId,
        organization_id: str,
        for_update: bool = False,
    ) -> Shipment | None:
        """Fetch a shipment within an organization.

        Args:
            shipment_id: Shipment to fetch
            organization_id: Caller's organization
            for_update: Lock the shipment row until the transaction ends
        """
        ...

    async def get_by_tracking_number(self, tracking_number: str) -> Shipment | None:
        """Fetch a shipment by tracking number across all organizations."""
        ...

    async def get_by_tracking_number_in_organization(
        self, tracking_number: str, organization_id: str
    ) -> Shipment | None:
        """Fetch a shipment by tracking number within one organization."""
        ...

    async def list_by_organization(self, organization_id: str) -> list[Shipment]:
        """List an organization's shipments, newest-created first."""
        ...

    async def add_event(self, event: TravelEvent) -> None:
        """Insert a travel event."""
        ...

    async def save_event(self, event: TravelEvent) -> None:
        """Persist edits to a travel event."""
        ...

    async def get_event(
        self, event_id: TravelEventId, organization_id: str
    ) -> TravelEvent | None:
        """Fetch an event whose shipment belongs to the organization."""
        ...

    async def delete_event(self, event: TravelEvent) -> None:
        """Delete a travel event and, by cascade, its attachment rows."""
        ...


@runtime_checkable
class IEventFileRepository(Protocol):
    """Repository for attachment metadata."""

    async def add(self, event_file: EventFile) -> None:
        """Insert attachment metadata."""
        ...

    async def get_by_id(
        self, file_id: EventFileId, organization_id: str
    ) -> EventFile | None:
        """Fetch an attachment whose event's shipment belongs to the organization."""
        ...

    async def list_by_event(self, event_id: TravelEventId) -> list[EventFile]:
        """List attachments for an event, most recently uploaded first."""
        ...

    async def delete(self, event_file: EventFile) -> None:
        """Delete attachment metadata."""
        ...


@runtime_checkable
class IOrganizationDirectory(Protocol):
    """Read-only view of organizations needed by Shipping.

    Keeps Shipping independent of the IAM context's aggregates.
    """

    async def get_name(self, organization_id: str) -> str | None:
        """Return the organization's display name, or None if it does not exist."""
        ...
