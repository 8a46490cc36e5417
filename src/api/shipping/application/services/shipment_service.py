"""Shipment application service for the Shipping bounded context.

Orchestrates the shipment ledger: creating shipments with organization
prefixed tracking numbers, appending and editing travel events, and keeping
each shipment's derived status in step with its event history.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.authorization import Permission, TenantAccessGate
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.observability import (
    DefaultShipmentServiceProbe,
    ShipmentServiceProbe,
)
from shipping.application.value_objects import (
    NewShipment,
    NewTravelEvent,
    ShipmentChanges,
    TravelEventChanges,
)
from shipping.domain.aggregates import Shipment, TravelEvent
from shipping.domain.value_objects import ShipmentId, TravelEventId
from shipping.ports.exceptions import (
    DuplicateTrackingNumberError,
    EventNotFoundError,
    OrganizationNotFoundError,
    ShipmentNotFoundError,
    StorageOperationError,
)
from shipping.ports.repositories import (
    IEventFileRepository,
    IOrganizationDirectory,
    IShipmentRepository,
)
from shipping.ports.storage import BlobStore


class ShipmentService:
    """Application service for the shipment ledger.

    Every tenant-scoped method takes the caller's ``TenantContext`` and
    filters by its organization. Lookups of rows owned by another
    organization fail exactly like lookups of rows that do not exist.

    Status maintenance:
    - Appending an event overwrites ``current_status`` in the same transaction
    - Editing an event's status or deleting an event triggers a
      recalculation in a second transaction that locks the shipment row;
      a failed recalculation is logged and never fails the caller
    """

    def __init__(
        self,
        shipment_repository: IShipmentRepository,
        organization_directory: IOrganizationDirectory,
        session: AsyncSession,
        event_file_repository: IEventFileRepository | None = None,
        blob_store: BlobStore | None = None,
        gate: TenantAccessGate | None = None,
        probe: ShipmentServiceProbe | None = None,
    ):
        """Initialize ShipmentService with dependencies.

        Args:
            shipment_repository: Repository for shipments and travel events
            organization_directory: Lookup of organization names for prefixes
            session: Database session for transaction management
            event_file_repository: Attachment metadata, used to clean up
                blobs when an event is deleted
            blob_store: Attachment storage, if configured
            gate: Tenant access gate for role checks
            probe: Optional domain probe for observability
        """
        self._shipments = shipment_repository
        self._organizations = organization_directory
        self._session = session
        self._event_files = event_file_repository
        self._blob_store = blob_store
        self._gate = gate or TenantAccessGate()
        self._probe = probe or DefaultShipmentServiceProbe()

    async def create_shipment(
        self, context: TenantContext, request: NewShipment
    ) -> Shipment:
        """Create a shipment with an organization-prefixed tracking number.

        Raises:
            PermissionDeniedError: If the caller may not manage shipments
            DuplicateTrackingNumberError: If the tracking number is taken
                in the caller's organization
            OrganizationNotFoundError: If the caller's organization is gone
            InvalidShipmentError: If an attribute violates a domain rule
            TrackingNumberError: If the tracking number cannot be composed
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)
        organization_id = context.organization_id

        try:
            async with self._session.begin():
                organization_name = await self._organizations.get_name(organization_id)
                if organization_name is None:
                    raise OrganizationNotFoundError()

                shipment = Shipment.create(
                    organization_id=organization_id,
                    organization_name=organization_name,
                    tracking_suffix=request.tracking_suffix,
                    origin=request.origin,
                    destination=request.destination,
                    weight=request.weight,
                    pieces=request.pieces,
                    initial_status=request.status,
                    company=request.company,
                    created_by_user_id=context.user_id,
                )

                existing = await self._shipments.get_by_tracking_number_in_organization(
                    shipment.tracking_number, organization_id
                )
                if existing is not None:
                    raise DuplicateTrackingNumberError()

                await self._shipments.add(shipment)
        except DuplicateTrackingNumberError:
            self._probe.duplicate_tracking_number(
                organization_id=organization_id,
                tracking_number=request.tracking_suffix,
            )
            raise

        self._probe.shipment_created(
            shipment_id=shipment.id.value,
            organization_id=organization_id,
            tracking_number=shipment.tracking_number,
        )
        return shipment

    async def get_by_tracking_number(self, tracking_number: str) -> Shipment | None:
        """Public lookup across all organizations.

        Returns:
            The shipment with its history newest-first, or None
        """
        shipment = await self._shipments.get_by_tracking_number(tracking_number)
        self._probe.shipment_tracked(
            tracking_number=tracking_number, found=shipment is not None
        )
        return shipment

    async def list_for_organization(self, context: TenantContext) -> list[Shipment]:
        """List the caller's shipments, newest-created first."""
        self._gate.require(context, Permission.VIEW_SHIPMENTS)
        return await self._shipments.list_by_organization(context.organization_id)

    async def get_shipment(
        self, context: TenantContext, shipment_id: ShipmentId
    ) -> Shipment:
        """Fetch one of the caller's shipments.

        Raises:
            ShipmentNotFoundError: If absent or owned by another organization
        """
        self._gate.require(context, Permission.VIEW_SHIPMENTS)
        shipment = await self._shipments.get_by_id(
            shipment_id, context.organization_id
        )
        if shipment is None:
            self._probe.shipment_not_found(shipment_id.value, context.organization_id)
            raise ShipmentNotFoundError()
        return shipment

    async def update_shipment(
        self,
        context: TenantContext,
        shipment_id: ShipmentId,
        changes: ShipmentChanges,
    ) -> Shipment:
        """Edit a shipment's descriptive fields. Status is left alone.

        Raises:
            ShipmentNotFoundError: If absent or owned by another organization
            InvalidShipmentError: If an edited value violates a domain rule
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)

        async with self._session.begin():
            shipment = await self._shipments.get_by_id(
                shipment_id, context.organization_id, for_update=True
            )
            if shipment is None:
                self._probe.shipment_not_found(
                    shipment_id.value, context.organization_id
                )
                raise ShipmentNotFoundError()

            shipment.update_details(
                origin=changes.origin,
                destination=changes.destination,
                weight=changes.weight,
                pieces=changes.pieces,
                company=changes.company,
                clear_company=changes.clear_company,
            )
            await self._shipments.save(shipment)

        self._probe.shipment_updated(shipment.id.value, context.organization_id)
        return shipment

    async def add_travel_event(
        self,
        context: TenantContext,
        shipment_id: ShipmentId,
        request: NewTravelEvent,
    ) -> TravelEvent:
        """Append an event stamped now; its status becomes the current status.

        Raises:
            ShipmentNotFoundError: If absent or owned by another organization
            InvalidTravelEventError: If status or location is blank
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)

        async with self._session.begin():
            shipment = await self._shipments.get_by_id(
                shipment_id, context.organization_id, for_update=True
            )
            if shipment is None:
                self._probe.shipment_not_found(
                    shipment_id.value, context.organization_id
                )
                raise ShipmentNotFoundError()

            event = shipment.record_event(
                status=request.status,
                location=request.location,
                event_type=request.event_type,
                description=request.description,
                created_by_user_id=context.user_id,
            )
            await self._shipments.add_event(event)
            await self._shipments.save(shipment)

        self._probe.travel_event_added(
            shipment_id=shipment.id.value,
            event_id=event.id.value,
            status=event.status,
        )
        return event

    async def update_travel_event(
        self,
        context: TenantContext,
        event_id: TravelEventId,
        changes: TravelEventChanges,
    ) -> TravelEvent:
        """Edit an event; recalculates the shipment status if status changed.

        Raises:
            EventNotFoundError: If absent or owned by another organization
            InvalidTravelEventError: If an edited value is blank
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)

        async with self._session.begin():
            event = await self._shipments.get_event(event_id, context.organization_id)
            if event is None:
                self._probe.event_not_found(event_id.value, context.organization_id)
                raise EventNotFoundError()

            event.revise(
                status=changes.status,
                location=changes.location,
                description=changes.description,
                event_type=changes.event_type,
            )
            await self._shipments.save_event(event)

        self._probe.travel_event_updated(event.id.value, changes.changes_status)

        if changes.changes_status:
            await self.recalculate_status(event.shipment_id, context.organization_id)

        return event

    async def delete_travel_event(
        self, context: TenantContext, event_id: TravelEventId
    ) -> None:
        """Delete an event and recalculate the shipment status.

        Attachment rows go with the event; their blobs are removed
        afterwards on a best-effort basis.

        Raises:
            EventNotFoundError: If absent or owned by another organization
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)
        attachment_paths: list[str] = []

        async with self._session.begin():
            event = await self._shipments.get_event(event_id, context.organization_id)
            if event is None:
                self._probe.event_not_found(event_id.value, context.organization_id)
                raise EventNotFoundError()

            if self._event_files is not None:
                files = await self._event_files.list_by_event(event.id)
                attachment_paths = [f.storage_path for f in files]

            await self._shipments.delete_event(event)

        self._probe.travel_event_deleted(event.id.value, event.shipment_id.value)

        await self.recalculate_status(event.shipment_id, context.organization_id)
        await self._remove_blobs(event.id, attachment_paths)

    async def recalculate_status(
        self, shipment_id: ShipmentId, organization_id: str
    ) -> str | None:
        """Re-derive and persist a shipment's status from its remaining events.

        Runs in its own transaction holding a row lock on the shipment so
        concurrent recalculations for one shipment serialize. Never raises.

        Returns:
            The new status, or None if the shipment vanished or the
            recalculation failed
        """
        try:
            async with self._session.begin():
                shipment = await self._shipments.get_by_id(
                    shipment_id, organization_id, for_update=True
                )
                if shipment is None:
                    return None

                previous = shipment.current_status
                status = shipment.recalculate_status()
                if status != previous:
                    await self._shipments.save(shipment)
        except Exception as e:
            self._probe.status_recalculation_failed(shipment_id.value, str(e))
            return None

        self._probe.status_recalculated(shipment_id.value, previous, status)
        return status

    async def _remove_blobs(self, event_id: TravelEventId, paths: list[str]) -> None:
        if not paths or self._blob_store is None:
            return
        try:
            await self._blob_store.remove(paths)
        except StorageOperationError as e:
            self._probe.attachment_cleanup_failed(event_id.value, str(e))
