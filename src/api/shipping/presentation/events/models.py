"""Pydantic models for travel event API requests."""

from __future__ import annotations

from pydantic import Field

from shared_kernel.api_models import CamelModel
from shipping.application.value_objects import TravelEventChanges
from shipping.domain.value_objects import EventType
from shipping.presentation.models import EventFileResponse


class UpdateTravelEventRequest(CamelModel):
    """Request model for editing a travel event. Omitted fields are unchanged."""

    status: str | None = Field(default=None, min_length=1, max_length=100)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    event_type: EventType | None = None

    def to_changes(self) -> TravelEventChanges:
        return TravelEventChanges(
            status=self.status,
            location=self.location,
            description=self.description,
            event_type=self.event_type,
        )


class EventFileListResponse(CamelModel):
    event_id: str
    files: list[EventFileResponse]
