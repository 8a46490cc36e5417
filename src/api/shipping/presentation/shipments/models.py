"""Pydantic models for shipment API requests."""

from __future__ import annotations

from pydantic import Field

from shared_kernel.api_models import CamelModel
from shipping.application.value_objects import (
    NewShipment,
    NewTravelEvent,
    ShipmentChanges,
)
from shipping.domain.value_objects import EventType
from shipping.presentation.models import ShipmentResponse


class CreateShipmentRequest(CamelModel):
    """Request model for creating a shipment.

    ``trackingNumber`` is the suffix only; the organization prefix is added
    by the server.
    """

    tracking_number: str = Field(..., min_length=1, max_length=80)
    origin: str = Field(..., min_length=1, max_length=255)
    destination: str = Field(..., min_length=1, max_length=255)
    weight: float = Field(..., ge=0)
    pieces: int = Field(..., ge=1)
    status: str = Field(..., min_length=1, max_length=100)
    company: str | None = Field(default=None, max_length=255)

    def to_command(self) -> NewShipment:
        return NewShipment(
            tracking_suffix=self.tracking_number,
            origin=self.origin,
            destination=self.destination,
            weight=self.weight,
            pieces=self.pieces,
            status=self.status,
            company=self.company,
        )


class UpdateShipmentRequest(CamelModel):
    """Request model for editing a shipment.

    Omitted fields are unchanged. An explicit ``"company": null`` clears the
    company.
    """

    origin: str | None = Field(default=None, min_length=1, max_length=255)
    destination: str | None = Field(default=None, min_length=1, max_length=255)
    weight: float | None = Field(default=None, ge=0)
    pieces: int | None = Field(default=None, ge=1)
    company: str | None = Field(default=None, max_length=255)

    def to_changes(self) -> ShipmentChanges:
        return ShipmentChanges(
            origin=self.origin,
            destination=self.destination,
            weight=self.weight,
            pieces=self.pieces,
            company=self.company,
            clear_company=(
                "company" in self.model_fields_set and self.company is None
            ),
        )


class AddTravelEventRequest(CamelModel):
    """Request model for appending a travel event."""

    status: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    event_type: EventType

    def to_command(self) -> NewTravelEvent:
        return NewTravelEvent(
            status=self.status,
            location=self.location,
            event_type=self.event_type,
            description=self.description,
        )


class ShipmentListResponse(CamelModel):
    shipments: list[ShipmentResponse]
