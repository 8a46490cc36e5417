"""Domain-Oriented Observability for Shipping infrastructure."""

from shipping.infrastructure.observability.repository_probe import (
    DefaultShipmentRepositoryProbe,
    ShipmentRepositoryProbe,
)

__all__ = [
    "DefaultShipmentRepositoryProbe",
    "ShipmentRepositoryProbe",
]
