"""Ports for the Shipping bounded context."""

from shipping.ports.repositories import (
    IEventFileRepository,
    IOrganizationDirectory,
    IShipmentRepository,
)
from shipping.ports.storage import BlobStore

__all__ = [
    "BlobStore",
    "IEventFileRepository",
    "IOrganizationDirectory",
    "IShipmentRepository",
]
