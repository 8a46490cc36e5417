"""Domain aggregates for the Shipping context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from shipping.domain.aggregates.event_file import EventFile
from shipping.domain.aggregates.shipment import (
    Shipment,
    TravelEvent,
    derive_current_status,
    order_newest_first,
)

__all__ = [
    "EventFile",
    "Shipment",
    "TravelEvent",
    "derive_current_status",
    "order_newest_first",
]
