"""Value objects for the Shipping domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

CREATED_STATUS = "Created"
"""Status a shipment falls back to once its last event is deleted."""


@dataclass(frozen=True)
class ShipmentId:
    """Identifier for a Shipment aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> ShipmentId:
        """Generate a new ShipmentId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ShipmentId:
        """Create ShipmentId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ShipmentId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class TravelEventId:
    """Identifier for a TravelEvent.

    ULIDs are time-ordered, so a later-created event always compares greater.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TravelEventId:
        """Generate a new TravelEventId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TravelEventId:
        """Create TravelEventId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TravelEventId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class EventFileId:
    """Identifier for an attachment stored against a travel event."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> EventFileId:
        """Generate a new EventFileId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> EventFileId:
        """Create EventFileId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid EventFileId: {value}") from e

        return cls(value=value)


class EventType(StrEnum):
    """Closed set of travel event categories."""

    PICKED_UP = "picked-up"
    IN_TRANSIT = "in-transit"
    OUT_FOR_DELIVERY = "out-for-delivery"
    AT_FACILITY = "at-facility"
    CUSTOMS_CLEARANCE = "customs-clearance"
    ATTEMPTED_DELIVERY = "attempted-delivery"
    DELIVERED = "delivered"
    EXCEPTION = "exception"
    RETURNED = "returned"
