"""Response models shared by the Shipping routes."""

from __future__ import annotations

from pydantic import Field

from shared_kernel.api_models import CamelModel, format_timestamp
from shipping.domain.aggregates import EventFile, Shipment, TravelEvent
from shipping.domain.aggregates.shipment import order_newest_first


class TravelEventResponse(CamelModel):
    """Response model for a travel event."""

    id: str = Field(..., description="Event ID (ULID format)")
    status: str
    location: str
    description: str
    timestamp: str = Field(..., description="UTC, millisecond precision")
    type: str = Field(..., description="Event type")

    @classmethod
    def from_domain(cls, event: TravelEvent) -> TravelEventResponse:
        return cls(
            id=event.id.value,
            status=event.status,
            location=event.location,
            description=event.description,
            timestamp=format_timestamp(event.timestamp),
            type=event.event_type.value,
        )


class ShipmentResponse(CamelModel):
    """Response model for a shipment with its history, newest event first."""

    id: str = Field(..., description="Shipment ID (ULID format)")
    tracking_number: str
    origin: str
    destination: str
    weight: float
    pieces: int
    status: str = Field(..., description="Current derived status")
    company: str | None = None
    travel_history: list[TravelEventResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, shipment: Shipment) -> ShipmentResponse:
        return cls(
            id=shipment.id.value,
            tracking_number=shipment.tracking_number,
            origin=shipment.origin,
            destination=shipment.destination,
            weight=shipment.weight,
            pieces=shipment.pieces,
            status=shipment.current_status,
            company=shipment.company,
            travel_history=[
                TravelEventResponse.from_domain(event)
                for event in order_newest_first(shipment.travel_events)
            ],
        )


class EventFileResponse(CamelModel):
    """Response model for attachment metadata."""

    id: str
    event_id: str
    original_name: str
    size: int
    mime_type: str
    uploaded_at: str
    uploaded_by: str | None = None

    @classmethod
    def from_domain(cls, event_file: EventFile) -> EventFileResponse:
        return cls(
            id=event_file.id.value,
            event_id=event_file.event_id.value,
            original_name=event_file.original_name,
            size=event_file.size,
            mime_type=event_file.mime_type,
            uploaded_at=format_timestamp(event_file.uploaded_at),
            uploaded_by=event_file.uploaded_by,
        )
