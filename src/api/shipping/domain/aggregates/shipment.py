"""Shipment aggregate for the Shipping context.

A shipment owns an ordered log of travel events. Its ``current_status`` is
a cached projection of that log: the status of the latest event, or
``CREATED_STATUS`` when the log has been emptied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Iterable

from shipping.domain import tracking_number
from shipping.domain.exceptions import InvalidShipmentError, InvalidTravelEventError
from shipping.domain.value_objects import (
    CREATED_STATUS,
    EventType,
    ShipmentId,
    TravelEventId,
)


def _require_text(value: str, field_name: str, error: type[ValueError]) -> str:
    stripped = value.strip()
    if not stripped:
        raise error(f"{field_name} is required")
    return stripped


def _validate_measurements(weight: float, pieces: int) -> None:
    if weight < 0:
        raise InvalidShipmentError("Weight must be zero or greater")
    if pieces < 1:
        raise InvalidShipmentError("Pieces must be at least 1")


@dataclass
class TravelEvent:
    """A single status observation in a shipment's history.

    ``timestamp`` is assigned by the server when the event is appended and
    is the ordering key for status derivation.
    """

    id: TravelEventId
    shipment_id: ShipmentId
    status: str
    location: str
    description: str
    event_type: EventType
    timestamp: datetime
    created_by_user_id: str | None = None

    @classmethod
    def create(
        cls,
        shipment_id: ShipmentId,
        status: str,
        location: str,
        event_type: EventType,
        description: str | None = None,
        created_by_user_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> TravelEvent:
        """Factory method for a new event stamped with the current time.

        Raises:
            InvalidTravelEventError: If status or location is blank
        """
        return cls(
            id=TravelEventId.generate(),
            shipment_id=shipment_id,
            status=_require_text(status, "Status", InvalidTravelEventError),
            location=_require_text(location, "Location", InvalidTravelEventError),
            description=description or "",
            event_type=EventType(event_type),
            timestamp=timestamp or datetime.now(UTC),
            created_by_user_id=created_by_user_id,
        )

    def revise(
        self,
        status: str | None = None,
        location: str | None = None,
        description: str | None = None,
        event_type: EventType | None = None,
    ) -> None:
        """Apply a partial edit. ``None`` leaves a field untouched.

        The timestamp is never edited, so revising an event does not
        reorder the history.
        """
        if status is not None:
            self.status = _require_text(status, "Status", InvalidTravelEventError)
        if location is not None:
            self.location = _require_text(location, "Location", InvalidTravelEventError)
        if description is not None:
            self.description = description
        if event_type is not None:
            self.event_type = EventType(event_type)

    def sort_key(self) -> tuple[datetime, str]:
        """Ordering key: timestamp, then event id for equal timestamps."""
        return (self.timestamp, self.id.value)


def derive_current_status(events: Iterable[TravelEvent]) -> str:
    """Return the status a shipment should show for ``events``.

    The latest event by timestamp wins; ties go to the greater event id.
    An empty history yields ``CREATED_STATUS``.

    Example:
        >>> derive_current_status([])
        'Created'
    """
    latest = max(events, key=TravelEvent.sort_key, default=None)
    if latest is None:
        return CREATED_STATUS
    return latest.status


def order_newest_first(events: Iterable[TravelEvent]) -> list[TravelEvent]:
    """Sort events the way histories are presented: newest first."""
    return sorted(events, key=TravelEvent.sort_key, reverse=True)


@dataclass
class Shipment:
    """Shipment aggregate scoped to a single organization.

    Business rules:
    - The tracking number is ``INITIALS-SUFFIX`` and unique per organization
    - Weight is non-negative, pieces is positive
    - ``organization_id`` never changes after creation
    - ``current_status`` mirrors the latest event once any event exists
    """

    id: ShipmentId
    organization_id: str
    tracking_number: str
    origin: str
    destination: str
    weight: float
    pieces: int
    current_status: str
    company: str | None = None
    created_by_user_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    travel_events: list[TravelEvent] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        organization_id: str,
        organization_name: str,
        tracking_suffix: str,
        origin: str,
        destination: str,
        weight: float,
        pieces: int,
        initial_status: str,
        company: str | None = None,
        created_by_user_id: str | None = None,
    ) -> Shipment:
        """Factory method for creating a new shipment.

        Args:
            organization_id: Owning organization
            organization_name: Used to derive the tracking number prefix
            tracking_suffix: Caller-supplied part after the prefix
            origin: Origin location
            destination: Destination location
            weight: Non-negative weight
            pieces: Positive piece count
            initial_status: Status shown until the first event is added
            company: Optional carrier or customer name
            created_by_user_id: The creating user

        Raises:
            InvalidShipmentError: If an attribute violates a domain rule
            TrackingNumberError: If the tracking number cannot be composed
        """
        _validate_measurements(weight, pieces)
        now = datetime.now(UTC)
        return cls(
            id=ShipmentId.generate(),
            organization_id=organization_id,
            tracking_number=tracking_number.compose(organization_name, tracking_suffix),
            origin=_require_text(origin, "Origin", InvalidShipmentError),
            destination=_require_text(destination, "Destination", InvalidShipmentError),
            weight=weight,
            pieces=pieces,
            current_status=_require_text(initial_status, "Status", InvalidShipmentError),
            company=company,
            created_by_user_id=created_by_user_id,
            created_at=now,
            updated_at=now,
        )

    def update_details(
        self,
        origin: str | None = None,
        destination: str | None = None,
        weight: float | None = None,
        pieces: int | None = None,
        company: str | None = None,
        clear_company: bool = False,
    ) -> None:
        """Apply a partial edit of the descriptive fields.

        Status and tracking number are not editable here. ``None`` leaves a
        field unchanged; ``clear_company`` is the only way to unset one.
        """
        _validate_measurements(
            self.weight if weight is None else weight,
            self.pieces if pieces is None else pieces,
        )
        if origin is not None:
            self.origin = _require_text(origin, "Origin", InvalidShipmentError)
        if destination is not None:
            self.destination = _require_text(
                destination, "Destination", InvalidShipmentError
            )
        if weight is not None:
            self.weight = weight
        if pieces is not None:
            self.pieces = pieces
        if clear_company:
            self.company = None
        elif company is not None:
            self.company = company
        self.updated_at = datetime.now(UTC)

    def record_event(
        self,
        status: str,
        location: str,
        event_type: EventType,
        description: str | None = None,
        created_by_user_id: str | None = None,
    ) -> TravelEvent:
        """Append an event stamped now and make its status current."""
        event = TravelEvent.create(
            shipment_id=self.id,
            status=status,
            location=location,
            event_type=event_type,
            description=description,
            created_by_user_id=created_by_user_id,
        )
        self.travel_events.insert(0, event)
        self.current_status = event.status
        self.updated_at = datetime.now(UTC)
        return event

    def recalculate_status(self) -> str:
        """Re-derive ``current_status`` from the loaded events."""
        self.current_status = derive_current_status(self.travel_events)
        return self.current_status
