"""Application-level observability for the Shipping context."""

from shipping.application.observability.event_file_service_probe import (
    DefaultEventFileServiceProbe,
    EventFileServiceProbe,
)
from shipping.application.observability.shipment_service_probe import (
    DefaultShipmentServiceProbe,
    ShipmentServiceProbe,
)

__all__ = [
    "DefaultEventFileServiceProbe",
    "DefaultShipmentServiceProbe",
    "EventFileServiceProbe",
    "ShipmentServiceProbe",
]
