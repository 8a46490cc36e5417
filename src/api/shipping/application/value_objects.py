"""Application-layer value objects for the Shipping bounded context.

Inputs to the shipment and attachment services. Partial updates use
``None`` for "leave unchanged"; presence of a field is what matters.
"""

from __future__ import annotations

from dataclasses import dataclass

from shipping.domain.value_objects import EventType


@dataclass(frozen=True)
class NewShipment:
    """Caller input for creating a shipment.

    ``tracking_suffix`` is only the part after the organization prefix.
    """

    tracking_suffix: str
    origin: str
    destination: str
    weight: float
    pieces: int
    status: str
    company: str | None = None


@dataclass(frozen=True)
class ShipmentChanges:
    """Partial edit of a shipment's descriptive fields.

    ``company`` of None leaves it unchanged; ``clear_company`` removes it.
    """

    origin: str | None = None
    destination: str | None = None
    weight: float | None = None
    pieces: int | None = None
    company: str | None = None
    clear_company: bool = False


@dataclass(frozen=True)
class NewTravelEvent:
    """Caller input for appending a travel event."""

    status: str
    location: str
    event_type: EventType
    description: str | None = None


@dataclass(frozen=True)
class TravelEventChanges:
    """Partial edit of a travel event."""

    status: str | None = None
    location: str | None = None
    description: str | None = None
    event_type: EventType | None = None

    @property
    def changes_status(self) -> bool:
        """True when the edit touches the status, which forces a recalculation."""
        return self.status is not None


@dataclass(frozen=True)
class FileUpload:
    """An attachment received from a caller."""

    original_name: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class SignedDownload:
    """Time-limited download link for an attachment."""

    url: str
    expires_in: int
    original_name: str
    size: int
    mime_type: str
