"""PostgreSQL implementation of IShipmentRepository.

Shipments and their travel events are stored in separate tables. Events are
loaded with one extra query per call (not per shipment) and attached to the
aggregates newest-first.
"""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.exceptions import is_unique_violation
from shipping.domain.aggregates import Shipment, TravelEvent
from shipping.domain.value_objects import EventType, ShipmentId, TravelEventId
from shipping.infrastructure.models import (
    TRACKING_NUMBER_CONSTRAINT,
    ShipmentModel,
    TravelEventModel,
)
from shipping.infrastructure.observability import (
    DefaultShipmentRepositoryProbe,
    ShipmentRepositoryProbe,
)
from shipping.ports.exceptions import DuplicateTrackingNumberError
from shipping.ports.repositories import IShipmentRepository


def _event_from_model(model: TravelEventModel) -> TravelEvent:
    return TravelEvent(
        id=TravelEventId(value=model.id),
        shipment_id=ShipmentId(value=model.shipment_id),
        status=model.status,
        location=model.location,
        description=model.description or "",
        event_type=EventType(model.event_type),
        timestamp=model.timestamp,
        created_by_user_id=model.created_by_user_id,
    )


def _shipment_from_model(
    model: ShipmentModel, events: list[TravelEvent] | None = None
) -> Shipment:
    return Shipment(
        id=ShipmentId(value=model.id),
        organization_id=model.organization_id,
        tracking_number=model.tracking_number,
        origin=model.origin,
        destination=model.destination,
        weight=model.weight,
        pieces=model.pieces,
        current_status=model.current_status,
        company=model.company,
        created_by_user_id=model.created_by_user_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        travel_events=events or [],
    )


class ShipmentRepository(IShipmentRepository):
    """PostgreSQL-backed repository for Shipment aggregates.

    Only flushes; the calling service owns transaction boundaries.
    """

    def __init__(
        self, session: AsyncSession, probe: ShipmentRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultShipmentRepositoryProbe()

    async def add(self, shipment: Shipment) -> None:
        """Insert a new shipment.

        Raises:
            DuplicateTrackingNumberError: If the (organization, tracking
                number) unique constraint rejects the row
        """
        model = ShipmentModel(
            id=shipment.id.value,
            organization_id=shipment.organization_id,
            tracking_number=shipment.tracking_number,
            origin=shipment.origin,
            destination=shipment.destination,
            weight=shipment.weight,
            pieces=shipment.pieces,
            current_status=shipment.current_status,
            company=shipment.company,
            created_by_user_id=shipment.created_by_user_id,
            created_at=shipment.created_at,
            updated_at=shipment.updated_at,
        )
        self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e, TRACKING_NUMBER_CONSTRAINT):
                self._probe.duplicate_tracking_number(
                    shipment.tracking_number, shipment.organization_id
                )
                raise DuplicateTrackingNumberError() from e
            raise

        self._probe.shipment_saved(shipment.id.value, shipment.organization_id)

    async def save(self, shipment: Shipment) -> None:
        """Persist descriptive fields and the current status."""
        model = await self._session.get(ShipmentModel, shipment.id.value)
        if model is None:
            return

        model.origin = shipment.origin
        model.destination = shipment.destination
        model.weight = shipment.weight
        model.pieces = shipment.pieces
        model.company = shipment.company
        model.current_status = shipment.current_status
        await self._session.flush()

        self._probe.shipment_saved(shipment.id.value, shipment.organization_id)

    async def get_by_id(
        self,
        shipment_id: ShipmentId,
        organization_id: str,
        for_update: bool = False,
    ) -> Shipment | None:
        """Fetch a shipment within an organization, optionally row-locked."""
        stmt = select(ShipmentModel).where(
            ShipmentModel.id == shipment_id.value,
            ShipmentModel.organization_id == organization_id,
        )
        if for_update:
            # Refresh identity-mapped rows loaded by an earlier transaction
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        shipment = await self._fetch_one(stmt)
        if shipment is not None and for_update:
            self._probe.shipment_locked(shipment_id.value)
        return shipment

    async def get_by_tracking_number(self, tracking_number: str) -> Shipment | None:
        """Fetch by tracking number without any organization filter.

        Tracking numbers are only unique per organization; if two
        organizations share a prefix and suffix the oldest shipment wins.
        """
        stmt = (
            select(ShipmentModel)
            .where(ShipmentModel.tracking_number == tracking_number)
            .order_by(ShipmentModel.created_at.asc())
            .limit(1)
        )
        return await self._fetch_one(stmt)

    async def get_by_tracking_number_in_organization(
        self, tracking_number: str, organization_id: str
    ) -> Shipment | None:
        stmt = select(ShipmentModel).where(
            ShipmentModel.tracking_number == tracking_number,
            ShipmentModel.organization_id == organization_id,
        )
        return await self._fetch_one(stmt)

    async def list_by_organization(self, organization_id: str) -> list[Shipment]:
        """List shipments newest-created first, each with its history."""
        stmt = (
            select(ShipmentModel)
            .where(ShipmentModel.organization_id == organization_id)
            .order_by(ShipmentModel.created_at.desc(), ShipmentModel.id.desc())
        )
        result = await self._session.execute(stmt)
        models = list(result.scalars().all())

        events = await self._load_events([m.id for m in models])
        return [_shipment_from_model(m, events.get(m.id, [])) for m in models]

    async def add_event(self, event: TravelEvent) -> None:
        self._session.add(
            TravelEventModel(
                id=event.id.value,
                shipment_id=event.shipment_id.value,
                status=event.status,
                location=event.location,
                description=event.description,
                event_type=event.event_type.value,
                timestamp=event.timestamp,
                created_by_user_id=event.created_by_user_id,
            )
        )
        await self._session.flush()
        self._probe.travel_event_saved(event.id.value, event.shipment_id.value)

    async def save_event(self, event: TravelEvent) -> None:
        model = await self._session.get(TravelEventModel, event.id.value)
        if model is None:
            return

        model.status = event.status
        model.location = event.location
        model.description = event.description
        model.event_type = event.event_type.value
        await self._session.flush()
        self._probe.travel_event_saved(event.id.value, event.shipment_id.value)

    async def get_event(
        self, event_id: TravelEventId, organization_id: str
    ) -> TravelEvent | None:
        """Fetch an event by joining through its shipment's organization."""
        stmt = (
            select(TravelEventModel)
            .join(ShipmentModel, ShipmentModel.id == TravelEventModel.shipment_id)
            .where(
                TravelEventModel.id == event_id.value,
                ShipmentModel.organization_id == organization_id,
            )
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return _event_from_model(model)

    async def delete_event(self, event: TravelEvent) -> None:
        await self._session.execute(
            delete(TravelEventModel).where(TravelEventModel.id == event.id.value)
        )
        await self._session.flush()
        self._probe.travel_event_deleted(event.id.value)

    async def _fetch_one(self, stmt: Select) -> Shipment | None:
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        events = await self._load_events([model.id])
        return _shipment_from_model(model, events.get(model.id, []))

    async def _load_events(
        self, shipment_ids: list[str]
    ) -> dict[str, list[TravelEvent]]:
        """Load events for the given shipments, newest first per shipment."""
        if not shipment_ids:
            return {}

        stmt = (
            select(TravelEventModel)
            .where(TravelEventModel.shipment_id.in_(shipment_ids))
            .order_by(TravelEventModel.timestamp.desc(), TravelEventModel.id.desc())
        )
        result = await self._session.execute(stmt)

        grouped: dict[str, list[TravelEvent]] = defaultdict(list)
        for model in result.scalars().all():
            grouped[model.shipment_id].append(_event_from_model(model))
        return grouped
