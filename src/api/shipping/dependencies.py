"""FastAPI dependency providers for the Shipping bounded context.

Caller identity comes from IAM's tenant context dependency; everything
else here is wiring of repositories, storage and services.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.user import get_access_gate
from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import get_storage_settings
from shared_kernel.authorization import TenantAccessGate
from shipping.application.observability import (
    DefaultEventFileServiceProbe,
    DefaultShipmentServiceProbe,
    EventFileServiceProbe,
    ShipmentServiceProbe,
)
from shipping.application.services import EventFileService, ShipmentService
from shipping.infrastructure.event_file_repository import EventFileRepository
from shipping.infrastructure.organization_directory import OrganizationDirectory
from shipping.infrastructure.shipment_repository import ShipmentRepository
from shipping.infrastructure.supabase_storage import SupabaseBlobStore
from shipping.ports.storage import BlobStore


def get_shipment_service_probe() -> ShipmentServiceProbe:
    """Get ShipmentServiceProbe instance.

    Returns:
        DefaultShipmentServiceProbe instance for observability
    """
    return DefaultShipmentServiceProbe()


def get_event_file_service_probe() -> EventFileServiceProbe:
    """Get EventFileServiceProbe instance.

    Returns:
        DefaultEventFileServiceProbe instance for observability
    """
    return DefaultEventFileServiceProbe()


def get_blob_store() -> BlobStore | None:
    """Get the attachment blob store, or None when storage is not configured."""
    settings = get_storage_settings()
    if not settings.is_configured:
        return None
    return SupabaseBlobStore(
        base_url=settings.supabase_url,
        service_key=settings.supabase_service_key.get_secret_value(),
        bucket=settings.bucket,
        timeout=settings.timeout_seconds,
    )


def get_shipment_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> ShipmentRepository:
    """Get ShipmentRepository instance.

    Args:
        session: Async database session

    Returns:
        ShipmentRepository instance
    """
    return ShipmentRepository(session=session)


def get_event_file_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> EventFileRepository:
    """Get EventFileRepository instance."""
    return EventFileRepository(session=session)


def get_shipment_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    shipment_repository: Annotated[ShipmentRepository, Depends(get_shipment_repository)],
    event_file_repository: Annotated[
        EventFileRepository, Depends(get_event_file_repository)
    ],
    blob_store: Annotated[BlobStore | None, Depends(get_blob_store)],
    gate: Annotated[TenantAccessGate, Depends(get_access_gate)],
    probe: Annotated[ShipmentServiceProbe, Depends(get_shipment_service_probe)],
) -> ShipmentService:
    """Get ShipmentService instance.

    Returns:
        ShipmentService instance sharing the request's write session
    """
    return ShipmentService(
        shipment_repository=shipment_repository,
        organization_directory=OrganizationDirectory(session=session),
        session=session,
        event_file_repository=event_file_repository,
        blob_store=blob_store,
        gate=gate,
        probe=probe,
    )


def get_event_file_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    shipment_repository: Annotated[ShipmentRepository, Depends(get_shipment_repository)],
    event_file_repository: Annotated[
        EventFileRepository, Depends(get_event_file_repository)
    ],
    blob_store: Annotated[BlobStore | None, Depends(get_blob_store)],
    gate: Annotated[TenantAccessGate, Depends(get_access_gate)],
    probe: Annotated[EventFileServiceProbe, Depends(get_event_file_service_probe)],
) -> EventFileService:
    """Get EventFileService instance.

    Returns:
        EventFileService instance sharing the request's write session
    """
    settings = get_storage_settings()
    return EventFileService(
        event_file_repository=event_file_repository,
        shipment_repository=shipment_repository,
        session=session,
        blob_store=blob_store,
        max_file_bytes=settings.max_file_bytes,
        signed_url_ttl=settings.signed_url_ttl_seconds,
        gate=gate,
        probe=probe,
    )


def get_public_shipment_service(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[ShipmentServiceProbe, Depends(get_shipment_service_probe)],
) -> ShipmentService:
    """Get a ShipmentService for unauthenticated tracking lookups.

    Bound to the read session; only ``get_by_tracking_number`` is used.
    """
    return ShipmentService(
        shipment_repository=ShipmentRepository(session=session),
        organization_directory=OrganizationDirectory(session=session),
        session=session,
        probe=probe,
    )
