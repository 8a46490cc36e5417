"""Application services for the Shipping bounded context."""

from shipping.application.services.event_file_service import EventFileService
from shipping.application.services.shipment_service import ShipmentService

__all__ = [
    "EventFileService",
    "ShipmentService",
]
