"""SQLAlchemy ORM models for the Shipping bounded context."""

from shipping.infrastructure.models.event_file import EventFileModel
from shipping.infrastructure.models.shipment import (
    TRACKING_NUMBER_CONSTRAINT,
    ShipmentModel,
    TravelEventModel,
)

__all__ = [
    "EventFileModel",
    "ShipmentModel",
    "TRACKING_NUMBER_CONSTRAINT",
    "TravelEventModel",
]
